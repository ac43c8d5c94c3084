"""SQLite profile store with async support."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from rootarchive.kernel.domain.owner import Profile
from rootarchive.kernel.logging import get_logger

logger = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    id INTEGER PRIMARY KEY,
    url TEXT
)
"""


class SQLiteProfileStore:
    """Profile records stored in the ``profiles`` table of a SQLite file.

    The connection opens lazily on first use and creates the table if it is
    missing. A profile row that does not exist yet is inserted with a null
    address on :meth:`aget`.
    """

    def __init__(self, db_path: str | Path = ":memory:", timeout: float = 5.0) -> None:
        """Initialize the store.

        Args
        ----
            db_path: Path to the SQLite file, or ":memory:". Default: ":memory:".
            timeout: Connection timeout in seconds. Default: 5.0.
        """
        self.db_path = Path(db_path).expanduser() if str(db_path) != ":memory:" else ":memory:"
        self.timeout = timeout
        self.connection: aiosqlite.Connection | None = None

    async def _ensure_database(self) -> None:
        if self.connection is not None:
            return

        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = await aiosqlite.connect(str(self.db_path), timeout=self.timeout)
        self.connection.row_factory = aiosqlite.Row
        await self.connection.execute(_SCHEMA)
        await self.connection.commit()
        logger.debug("Opened profile store {path}", path=str(self.db_path))

    @asynccontextmanager
    async def _get_cursor(self) -> AsyncIterator[aiosqlite.Cursor]:
        """Cursor on the lazily opened connection.

        Raises
        ------
        RuntimeError
            If the connection could not be established
        aiosqlite.Error
            If a database error occurs; the transaction is rolled back
        """
        await self._ensure_database()
        if self.connection is None:
            raise RuntimeError("Database connection not established")

        async with self.connection.cursor() as cursor:
            try:
                yield cursor
            except aiosqlite.Error as e:
                logger.error("Profile store error: {error}", error=str(e))
                await self.connection.rollback()
                raise

    async def aget(self, profile_id: int) -> Profile:
        async with self._get_cursor() as cursor:
            await cursor.execute("SELECT id, url FROM profiles WHERE id = ?", (profile_id,))
            row = await cursor.fetchone()
            if row is None:
                await cursor.execute(
                    "INSERT INTO profiles (id, url) VALUES (?, NULL)", (profile_id,)
                )
                await self.connection.commit()  # type: ignore[union-attr]
                logger.info("Created profile {id}", id=profile_id)
                return Profile(id=profile_id)
            return Profile(id=row["id"], address=row["url"])

    async def aupdate(self, profile_id: int, address: str) -> None:
        async with self._get_cursor() as cursor:
            await cursor.execute(
                "INSERT INTO profiles (id, url) VALUES (?, ?) "
                "ON CONFLICT(id) DO UPDATE SET url = excluded.url",
                (profile_id, address),
            )
            await self.connection.commit()  # type: ignore[union-attr]

    async def close(self) -> None:
        """Close the database connection."""
        if self.connection:
            await self.connection.close()
            self.connection = None


__all__ = ["SQLiteProfileStore"]
