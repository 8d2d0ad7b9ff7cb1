"""
Pydantic schemas for the grid sync API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from gridsync.db import GRID_SLOT_COUNT


class GridPayload(BaseModel):
    name: Optional[str] = None
    # Slots are stored as sent: null for empty, otherwise the client's cover object.
    manga: list[Optional[dict[str, Any]]] = Field(
        ..., min_length=GRID_SLOT_COUNT, max_length=GRID_SLOT_COUNT
    )


class SaveGridRequest(BaseModel):
    grid: GridPayload


class SaveGridResponse(BaseModel):
    ok: bool
    id: str


class GridDocument(BaseModel):
    id: str
    userId: str
    name: Optional[str] = None
    manga: list[Optional[dict[str, Any]]]
    createdAt: datetime


class ListGridsResponse(BaseModel):
    grids: list[GridDocument]
