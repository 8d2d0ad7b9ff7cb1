"""
Grid persistence for SQLAlchemy databases and an in-memory test implementation.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from sqlalchemy import JSON, Column, Float, String, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

GRID_SLOT_COUNT = 9


class StorageError(Exception):
    """Raised when the grid store cannot complete a read or write."""


class GridStore(Protocol):
    """Interface for grid document storage."""

    def create_grid(
        self,
        user_id: str,
        name: Optional[str],
        manga: list,
        created_at: Optional[float] = None,
    ) -> "GridRecord":
        ...

    def list_grids(self, user_id: str) -> list["GridRecord"]:
        ...

    def delete_grid(self, grid_id: str) -> bool:
        ...


@dataclass
class GridRecord:
    grid_id: str
    user_id: str
    name: Optional[str]
    manga: list
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.grid_id,
            "userId": self.user_id,
            "name": self.name,
            "manga": self.manga,
            "createdAt": datetime.fromtimestamp(self.created_at, tz=timezone.utc),
        }


class InMemoryGridStore:
    """Simple in-memory grid store for development and tests."""

    def __init__(self):
        self.grids: Dict[str, GridRecord] = {}

    def create_grid(
        self,
        user_id: str,
        name: Optional[str],
        manga: list,
        created_at: Optional[float] = None,
    ) -> GridRecord:
        record = GridRecord(
            grid_id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            manga=list(manga),
        )
        if created_at is not None:
            record.created_at = created_at
        self.grids[record.grid_id] = record
        return record

    def list_grids(self, user_id: str) -> list[GridRecord]:
        # Reverse insertion order first so ties on created_at put newer saves first.
        owned = [g for g in reversed(list(self.grids.values())) if g.user_id == user_id]
        return sorted(owned, key=lambda g: g.created_at, reverse=True)

    def delete_grid(self, grid_id: str) -> bool:
        return self.grids.pop(grid_id, None) is not None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.grids.clear()


class SqlGridStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlGridStore")
        try:
            self.engine = create_engine(
                database_url,
                future=True,
                pool_pre_ping=True,
                pool_recycle=1800,
            )
        except SQLAlchemyError as exc:
            raise StorageError("Invalid database configuration") from exc
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        # Tables are created on first use, inside each operation's error handling.
        if not self._schema_ready:
            Base.metadata.create_all(self.engine)
            self._schema_ready = True

    def _to_record(self, row: "GridRow") -> GridRecord:
        return GridRecord(
            grid_id=row.id,
            user_id=row.user_id,
            name=row.name,
            manga=row.manga or [],
            created_at=row.created_at,
        )

    def create_grid(
        self,
        user_id: str,
        name: Optional[str],
        manga: list,
        created_at: Optional[float] = None,
    ) -> GridRecord:
        row = GridRow(
            id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            manga=list(manga),
            created_at=created_at if created_at is not None else time.time(),
        )
        try:
            self._ensure_schema()
            with self.Session() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to save grid") from exc

    def list_grids(self, user_id: str) -> list[GridRecord]:
        stmt = (
            select(GridRow)
            .where(GridRow.user_id == user_id)
            .order_by(GridRow.created_at.desc())
        )
        try:
            self._ensure_schema()
            with self.Session() as session:
                rows = session.execute(stmt).scalars().all()
                return [self._to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to fetch grids") from exc

    def delete_grid(self, grid_id: str) -> bool:
        try:
            self._ensure_schema()
            with self.Session() as session:
                result = session.execute(delete(GridRow).where(GridRow.id == grid_id))
                session.commit()
                return bool(result.rowcount)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to delete grid") from exc


Base = declarative_base()


class GridRow(Base):
    __tablename__ = "grids"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    manga = Column(JSON, nullable=False)
    created_at = Column(Float, nullable=False, index=True)
