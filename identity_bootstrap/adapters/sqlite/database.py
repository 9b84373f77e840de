"""
SQLite identity database handle.

One connection per scope: opened by ``async with``, closed on every exit
path. Blocking sqlite3 calls run in a worker thread so the event loop is
never blocked; callers await them one at a time.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar

from identity_bootstrap.adapters.sqlite.migrator import SQLiteMigrator
from identity_bootstrap.domain.errors import DatabaseClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class IdentityDatabase:
    def __init__(self, db_path: str, migrator: SQLiteMigrator | None = None):
        self.db_path = db_path
        self.migrator = migrator or SQLiteMigrator()
        self._conn: sqlite3.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _connect(self) -> sqlite3.Connection:
        # Worker threads change between calls; access is still strictly sequential
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    async def open(self) -> None:
        if self._conn is None:
            self._conn = await asyncio.to_thread(self._connect)
            logger.debug("Opened identity database %s", self.db_path)

    async def close(self) -> None:
        conn, self._conn = self._conn, None
        if conn is not None:
            await asyncio.to_thread(conn.close)
            logger.debug("Closed identity database %s", self.db_path)

    async def __aenter__(self) -> IdentityDatabase:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn(conn, *args)`` against the open connection in a worker thread."""
        if self._conn is None:
            raise DatabaseClosedError()
        return await asyncio.to_thread(fn, self._conn, *args)

    async def ensure_created(self) -> bool:
        applied = await self.run(self.migrator.run_migrations)
        return bool(applied)

    async def pending_migrations(self) -> list[str]:
        return await self.run(self.migrator.pending)
