"""
Identity store interfaces.

Protocol-based interfaces for the user/role stores and the database handle.
Every store call is awaited; implementations may suspend on I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar
from uuid import UUID

from identity_bootstrap.domain.entities import OperationOutcome, Role, User

T = TypeVar("T")


class DatabasePort(Protocol):
    """Scoped database handle. Open with ``async with``; closed on exit."""

    async def __aenter__(self) -> DatabasePort:
        ...

    async def __aexit__(self, *exc_info: Any) -> None:
        ...

    async def ensure_created(self) -> bool:
        """Create missing schema objects. Returns True if anything was created."""
        ...

    async def pending_migrations(self) -> list[str]:
        """Schema scripts not yet applied. Read-only."""
        ...

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        ...


class RoleStorePort(Protocol):
    async def find_by_name(self, name: str) -> Role | None:
        """Exact (case-sensitive) name lookup."""
        ...

    async def find_by_normalized_name(self, normalized_name: str) -> Role | None:
        ...

    async def create(self, role: Role) -> OperationOutcome:
        ...

    async def list_all(self) -> list[Role]:
        ...


class UserStorePort(Protocol):
    async def find_by_name(self, user_name: str) -> User | None:
        """Exact (case-sensitive) user name lookup."""
        ...

    async def find_by_normalized_name(self, normalized_user_name: str) -> User | None:
        ...

    async def create(self, user: User) -> OperationOutcome:
        ...

    async def get_roles(self, user_id: UUID) -> list[str]:
        ...

    async def add_to_role(self, user_id: UUID, role_id: UUID) -> OperationOutcome:
        ...


class PasswordHasherPort(Protocol):
    def hash_password(self, password: str) -> str:
        ...

    def verify_password(self, password: str, hash_str: str) -> bool:
        ...
