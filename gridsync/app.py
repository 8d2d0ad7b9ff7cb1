"""
FastAPI application entry point for the grid sync backend.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gridsync.config import get_settings
from gridsync.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Manga Grid Sync", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
