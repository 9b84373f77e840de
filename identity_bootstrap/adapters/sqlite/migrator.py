import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


class SQLiteMigrator:
    """Applies ordered ``*.sql`` scripts and records them in ``_migrations``.

    Scripts are split on ``-- Down``; only the part above it is executed.
    Checking for pending scripts only reads ``sqlite_master`` and
    ``_migrations``, so a current schema is never written to.
    """

    def __init__(self, migrations_dir: Path | str = MIGRATIONS_DIR):
        self.migrations_dir = Path(migrations_dir)

    def available(self) -> list[str]:
        return sorted(f for f in os.listdir(self.migrations_dir) if f.endswith(".sql"))

    def _has_migration_table(self, conn: sqlite3.Connection) -> bool:
        row = conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = '_migrations'"
        ).fetchone()
        return row is not None

    def _ensure_migration_table(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
        """)

    def applied(self, conn: sqlite3.Connection) -> set[str]:
        if not self._has_migration_table(conn):
            return set()
        cursor = conn.execute("SELECT filename FROM _migrations")
        # Rows are dicts when the connection uses dict_factory
        return {
            row["filename"] if isinstance(row, dict) else row[0] for row in cursor.fetchall()
        }

    def pending(self, conn: sqlite3.Connection) -> list[str]:
        done = self.applied(conn)
        return [f for f in self.available() if f not in done]

    def run_migrations(self, conn: sqlite3.Connection) -> list[str]:
        """Apply all pending migrations and return their filenames."""
        pending = self.pending(conn)
        if not pending:
            logger.debug("Schema is up to date")
            return []

        self._ensure_migration_table(conn)
        for filename in pending:
            logger.info("Applying migration: %s", filename)
            self._apply_migration(conn, filename)
        return pending

    def _read_up_script(self, filename: str) -> str:
        with open(self.migrations_dir / filename) as f:
            content = f.read()
        if "-- Down" in content:
            return content.split("-- Down")[0]
        return content

    def _apply_migration(self, conn: sqlite3.Connection, filename: str) -> None:
        script = self._read_up_script(filename)
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
