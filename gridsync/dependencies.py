"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException

from gridsync.auth import (
    AuthError,
    GoogleTokenVerifier,
    StaticTokenVerifier,
    TokenVerifier,
    extract_bearer_token,
)
from gridsync.config import get_settings
from gridsync.db import GridStore, InMemoryGridStore, SqlGridStore
from gridsync.proxy import ImageFetcher, RequestsImageFetcher

logger = logging.getLogger(__name__)

_grid_store: GridStore | None = None
_token_verifier: TokenVerifier | None = None
_image_fetcher: ImageFetcher | None = None


def get_grid_store() -> GridStore:
    """
    Return a singleton grid store so saved grids persist across requests.
    """
    global _grid_store
    if _grid_store:
        return _grid_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _grid_store = InMemoryGridStore()
    else:
        _grid_store = SqlGridStore(settings.database_url)
    return _grid_store


def get_token_verifier() -> TokenVerifier:
    global _token_verifier
    if _token_verifier:
        return _token_verifier

    settings = get_settings()
    if settings.google_client_id:
        _token_verifier = GoogleTokenVerifier(settings.google_client_id)
    else:
        logger.warning("GOOGLE_CLIENT_ID is not set; all grid requests will get 401")
        _token_verifier = StaticTokenVerifier()
    return _token_verifier


def get_image_fetcher() -> ImageFetcher:
    global _image_fetcher
    if _image_fetcher:
        return _image_fetcher

    settings = get_settings()
    _image_fetcher = RequestsImageFetcher(timeout=settings.proxy_timeout_seconds)
    return _image_fetcher


def get_current_user_id(
    authorization: str | None = Header(default=None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> str:
    """
    Resolve the signed-in user's subject id from the bearer token.
    """
    try:
        token = extract_bearer_token(authorization)
        return verifier.verify(token)
    except AuthError as exc:
        raise HTTPException(
            status_code=401,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
