"""
Run the API with uvicorn on the configured host and port.
"""

from __future__ import annotations

import logging

import uvicorn

from gridsync.config import get_settings
from gridsync.dependencies import get_grid_store

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = get_grid_store()
    logger.info("Grid store: %s", store.__class__.__name__)
    logger.info("Server running on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "gridsync.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
