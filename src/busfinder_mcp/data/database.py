"""Database connection helper for the search history SQLite database."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from busfinder_mcp.data.config import get_config


def get_history_db_path() -> Path:
    """Get the history database path from configuration."""
    return get_config().history_db_path


@asynccontextmanager
async def get_history_db(db_path: Path | None = None) -> AsyncIterator[aiosqlite.Connection]:
    """Async context manager for history DB connections with Row factory.

    Args:
        db_path: Optional path to the database. If not provided, uses
                 BUSFINDER_HISTORY_DB or defaults to 'data/history.db'.

    Yields:
        aiosqlite.Connection configured with Row factory for dict-like access.
    """
    if db_path is None:
        db_path = get_history_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        yield db
