"""SQLite-backed store of recent (from, to) searches."""

import asyncio
import logging
import time
from pathlib import Path

import aiosqlite

from busfinder_mcp.data.database import get_history_db
from busfinder_mcp.models.route import SearchHistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS search_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_location TEXT NOT NULL,
    to_location TEXT NOT NULL,
    timestamp INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_search_history_timestamp ON search_history(timestamp);
"""

# Newest first; id breaks ties between writes in the same millisecond
RECENT_ORDER = "ORDER BY timestamp DESC, id DESC"

SELECT_ENTRIES = "SELECT id, from_location, to_location, timestamp FROM search_history"


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


async def _next_timestamp(db: aiosqlite.Connection) -> int:
    """Current time in ms, bumped past the newest stored entry if the clock lags."""
    async with db.execute("SELECT MAX(timestamp) AS newest FROM search_history") as cursor:
        row = await cursor.fetchone()
    newest = row["newest"] if row else None
    now = _now_millis()
    return now if newest is None else max(now, newest + 1)


def _row_to_entry(row: aiosqlite.Row) -> SearchHistoryEntry:
    return SearchHistoryEntry(
        id=row["id"],
        from_location=row["from_location"],
        to_location=row["to_location"],
        timestamp=row["timestamp"],
    )


class SearchHistoryStore:
    """Recent searches, most recent first, capped at `limit` entries.

    Uniqueness is by case-insensitive (from, to) pair: recording a search
    that already exists refreshes its timestamp instead of adding a row.
    Writes from one store are serialized, so concurrent recordings of the
    same pair still leave a single entry.
    """

    def __init__(self, db_path: Path | None = None, limit: int = DEFAULT_HISTORY_LIMIT):
        self.db_path = db_path
        self.limit = limit
        self._initialized = False
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create the history table if needed."""
        async with get_history_db(self.db_path) as db:
            await db.executescript(SCHEMA_SQL)
            await db.commit()
        self._initialized = True

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()

    async def get_recent(self, limit: int | None = None) -> list[SearchHistoryEntry]:
        """Get recent searches, newest first."""
        await self._ensure_initialized()
        limit = self.limit if limit is None else limit

        sql = f"{SELECT_ENTRIES} {RECENT_ORDER} LIMIT ?"
        async with get_history_db(self.db_path) as db:
            async with db.execute(sql, (limit,)) as cursor:
                rows = await cursor.fetchall()

        return [_row_to_entry(row) for row in rows]

    async def _get_all(self, db: aiosqlite.Connection) -> list[SearchHistoryEntry]:
        sql = f"{SELECT_ENTRIES} {RECENT_ORDER}"
        async with db.execute(sql) as cursor:
            rows = await cursor.fetchall()
        return [_row_to_entry(row) for row in rows]

    async def _insert(
        self, db: aiosqlite.Connection, from_location: str, to_location: str
    ) -> SearchHistoryEntry:
        timestamp = await _next_timestamp(db)
        cursor = await db.execute(
            "INSERT INTO search_history (from_location, to_location, timestamp) "
            "VALUES (?, ?, ?)",
            (from_location, to_location, timestamp),
        )
        return SearchHistoryEntry(
            id=cursor.lastrowid,
            from_location=from_location,
            to_location=to_location,
            timestamp=timestamp,
        )

    async def _touch(
        self, db: aiosqlite.Connection, entry: SearchHistoryEntry
    ) -> SearchHistoryEntry:
        timestamp = await _next_timestamp(db)
        await db.execute(
            "UPDATE search_history SET timestamp = ? WHERE id = ?",
            (timestamp, entry.id),
        )
        return entry.model_copy(update={"timestamp": timestamp})

    async def _prune(self, db: aiosqlite.Connection) -> None:
        """Keep only the newest `limit` entries."""
        stale = (await self._get_all(db))[self.limit:]
        if stale:
            await db.executemany(
                "DELETE FROM search_history WHERE id = ?",
                [(entry.id,) for entry in stale],
            )
            logger.debug(f"Pruned {len(stale)} old searches")

    async def insert(self, from_location: str, to_location: str) -> SearchHistoryEntry:
        """Insert a new entry stamped with the current time."""
        await self._ensure_initialized()
        async with self._write_lock, get_history_db(self.db_path) as db:
            entry = await self._insert(db, from_location, to_location)
            await db.commit()
        return entry

    async def update_timestamp(self, entry: SearchHistoryEntry) -> SearchHistoryEntry:
        """Refresh an entry's timestamp to now."""
        await self._ensure_initialized()
        async with self._write_lock, get_history_db(self.db_path) as db:
            updated = await self._touch(db, entry)
            await db.commit()
        return updated

    async def delete(self, entry: SearchHistoryEntry) -> None:
        """Delete a single entry."""
        await self._ensure_initialized()
        async with self._write_lock, get_history_db(self.db_path) as db:
            await db.execute("DELETE FROM search_history WHERE id = ?", (entry.id,))
            await db.commit()

    async def clear_all(self) -> None:
        """Delete every entry."""
        await self._ensure_initialized()
        async with self._write_lock, get_history_db(self.db_path) as db:
            await db.execute("DELETE FROM search_history")
            await db.commit()

    async def record_search(self, from_location: str, to_location: str) -> SearchHistoryEntry:
        """Save a search, refreshing the timestamp of an existing equal pair.

        Matching is case-insensitive on the trimmed values. After inserting,
        entries beyond the newest `limit` are pruned. Lookup, write and prune
        share one connection and one transaction.
        """
        await self._ensure_initialized()
        from_location = from_location.strip()
        to_location = to_location.strip()
        from_key = from_location.casefold()
        to_key = to_location.casefold()

        async with self._write_lock, get_history_db(self.db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            existing = next(
                (
                    entry
                    for entry in await self._get_all(db)
                    if entry.from_location.strip().casefold() == from_key
                    and entry.to_location.strip().casefold() == to_key
                ),
                None,
            )
            if existing is not None:
                entry = await self._touch(db, existing)
                await db.commit()
                logger.debug(
                    f"Updated timestamp for existing search {from_location!r} -> {to_location!r}"
                )
                return entry

            entry = await self._insert(db, from_location, to_location)
            await self._prune(db)
            await db.commit()

        logger.debug(f"Saved search {from_location!r} -> {to_location!r}")
        return entry
