import logging
import sqlite3
from datetime import datetime
from typing import Any
from uuid import UUID

from identity_bootstrap.adapters.sqlite.database import IdentityDatabase
from identity_bootstrap.domain.entities import OperationOutcome, Role, User
from identity_bootstrap.domain.errors import default_error

logger = logging.getLogger(__name__)


def _insert(conn: sqlite3.Connection, sql: str, params: tuple[Any, ...]) -> OperationOutcome:
    # A UNIQUE/FK violation here usually means another process won a race
    # that the validators could not see; callers only get a generic failure.
    try:
        conn.execute(sql, params)
        conn.commit()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        logger.warning("Insert rejected by store constraints: %s", e)
        return OperationOutcome.failed(default_error())
    return OperationOutcome.success()


class SQLiteRoleStore:
    def __init__(self, database: IdentityDatabase):
        self.database = database

    async def find_by_name(self, name: str) -> Role | None:
        return await self.database.run(self._find_one, "name", name)

    async def find_by_normalized_name(self, normalized_name: str) -> Role | None:
        return await self.database.run(self._find_one, "normalized_name", normalized_name)

    async def create(self, role: Role) -> OperationOutcome:
        return await self.database.run(
            _insert,
            "INSERT INTO roles (id, name, normalized_name) VALUES (?, ?, ?)",
            (str(role.id), role.name, role.normalized_name),
        )

    async def list_all(self) -> list[Role]:
        return await self.database.run(self._list_all)

    def _find_one(self, conn: sqlite3.Connection, column: str, value: str) -> Role | None:
        row = conn.execute(f"SELECT * FROM roles WHERE {column} = ?", (value,)).fetchone()
        return self._map_row(row) if row else None

    def _list_all(self, conn: sqlite3.Connection) -> list[Role]:
        rows = conn.execute("SELECT * FROM roles ORDER BY name").fetchall()
        return [self._map_row(row) for row in rows]

    def _map_row(self, row: dict[str, Any]) -> Role:
        return Role(id=UUID(row["id"]), name=row["name"])


class SQLiteUserStore:
    def __init__(self, database: IdentityDatabase):
        self.database = database

    async def find_by_name(self, user_name: str) -> User | None:
        return await self.database.run(self._find_one, "user_name", user_name)

    async def find_by_normalized_name(self, normalized_user_name: str) -> User | None:
        return await self.database.run(
            self._find_one, "normalized_user_name", normalized_user_name
        )

    async def create(self, user: User) -> OperationOutcome:
        return await self.database.run(
            _insert,
            """
            INSERT INTO users (
                id, user_name, normalized_user_name, display_name,
                password_hash, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(user.id),
                user.user_name,
                user.normalized_user_name,
                user.display_name,
                user.password_hash,
                user.created_at.isoformat(),
                user.updated_at.isoformat(),
            ),
        )

    async def get_roles(self, user_id: UUID) -> list[str]:
        return await self.database.run(self._get_roles, str(user_id))

    async def add_to_role(self, user_id: UUID, role_id: UUID) -> OperationOutcome:
        return await self.database.run(
            _insert,
            "INSERT INTO user_roles (user_id, role_id) VALUES (?, ?)",
            (str(user_id), str(role_id)),
        )

    def _find_one(self, conn: sqlite3.Connection, column: str, value: str) -> User | None:
        row = conn.execute(f"SELECT * FROM users WHERE {column} = ?", (value,)).fetchone()
        if not row:
            return None
        return self._map_row_to_user(conn, row)

    def _get_roles(self, conn: sqlite3.Connection, user_id: str) -> list[str]:
        rows = conn.execute(
            """
            SELECT r.name FROM roles r
            JOIN user_roles ur ON ur.role_id = r.id
            WHERE ur.user_id = ?
            ORDER BY r.name
            """,
            (user_id,),
        ).fetchall()
        return [r["name"] for r in rows]

    def _map_row_to_user(self, conn: sqlite3.Connection, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            user_name=row["user_name"],
            display_name=row["display_name"],
            password_hash=row["password_hash"],
            roles=self._get_roles(conn, row["id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
