"""
Operator tool for inspecting and removing saved grids.

The HTTP API never deletes grids; this script is the only way to do it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gridsync.config import get_settings
from gridsync.db import GRID_SLOT_COUNT, GridStore, SqlGridStore, StorageError

logger = logging.getLogger(__name__)


def _format_grid(record) -> str:
    created = datetime.fromtimestamp(record.created_at, tz=timezone.utc).isoformat()
    filled = sum(1 for slot in record.manga if slot)
    return f"{record.grid_id}\t{created}\t{filled}/{GRID_SLOT_COUNT}\t{record.name or ''}"


def list_command(store: GridStore, user_id: str) -> int:
    records = store.list_grids(user_id)
    for record in records:
        print(_format_grid(record))
    logger.info("%d grid(s) for user %s", len(records), user_id)
    return 0


def delete_command(store: GridStore, grid_id: str) -> int:
    if not store.delete_grid(grid_id):
        logger.error("Grid %s not found", grid_id)
        return 1
    logger.info("Deleted grid %s", grid_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage saved manga grids")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List a user's grids, newest first")
    list_parser.add_argument(
        "-u",
        "--user",
        required=True,
        help="Identity provider subject id of the owner",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete one grid by id")
    delete_parser.add_argument("grid_id", help="Grid id as returned by the save API")
    return parser


def main(argv: list[str] | None = None, store: GridStore | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(), format="%(levelname)s:%(message)s"
    )
    try:
        if store is None:
            if not settings.database_url:
                logger.error(
                    "DATABASE_URL is not set; refusing to run against an empty store"
                )
                return 1
            store = SqlGridStore(settings.database_url)
        if args.command == "list":
            return list_command(store, args.user)
        return delete_command(store, args.grid_id)
    except StorageError:
        logger.exception("Storage failure")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
