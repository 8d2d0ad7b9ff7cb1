"""
HTTP routes for the grid sync API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from gridsync.db import GridStore, StorageError
from gridsync.dependencies import (
    get_current_user_id,
    get_grid_store,
    get_image_fetcher,
)
from gridsync.proxy import ImageFetcher, ProxyError
from gridsync.schemas import (
    GridDocument,
    ListGridsResponse,
    SaveGridRequest,
    SaveGridResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/grids", response_model=SaveGridResponse)
def save_grid(
    payload: SaveGridRequest,
    user_id: str = Depends(get_current_user_id),
    store: GridStore = Depends(get_grid_store),
):
    """
    Insert a new grid for the signed-in user. Saves never overwrite.
    """
    try:
        record = store.create_grid(user_id, payload.grid.name, payload.grid.manga)
    except StorageError:
        logger.exception("Failed to save grid for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to save")
    return SaveGridResponse(ok=True, id=record.grid_id)


@router.get("/grids", response_model=ListGridsResponse)
def list_grids(
    user_id: str = Depends(get_current_user_id),
    store: GridStore = Depends(get_grid_store),
):
    try:
        records = store.list_grids(user_id)
    except StorageError:
        logger.exception("Failed to fetch grids for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch")
    return ListGridsResponse(
        grids=[GridDocument(**record.as_dict()) for record in records]
    )


@router.get("/proxy")
def proxy_image(
    url: str | None = Query(None, description="Absolute URL of the image to relay"),
    fetcher: ImageFetcher = Depends(get_image_fetcher),
):
    """
    Relay a remote image with a permissive CORS header so canvases stay untainted.
    """
    if not url:
        raise HTTPException(status_code=400, detail="No URL")
    try:
        upstream = fetcher.fetch(url)
    except ProxyError:
        raise HTTPException(status_code=500, detail="Proxy error")
    # Set the header directly; media_type would append a charset to text types.
    return StreamingResponse(
        upstream.chunks,
        headers={
            "Content-Type": upstream.content_type,
            "Access-Control-Allow-Origin": "*",
        },
    )
