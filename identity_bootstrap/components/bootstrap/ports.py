"""Bootstrap component port definitions.

Protocol interfaces for the services the bootstrap routine resolves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from identity_bootstrap.domain.entities import OperationOutcome, Role, User
    from identity_bootstrap.ports.identity import DatabasePort

    from .models import BootstrapOptions


class RoleManagerPort(Protocol):
    async def role_exists(self, name: str) -> bool:
        ...

    async def find_by_name(self, name: str) -> Role | None:
        ...

    async def create(self, role: Role) -> OperationOutcome:
        ...


class UserManagerPort(Protocol):
    async def find_by_name(self, user_name: str) -> User | None:
        ...

    async def get_roles(self, user: User) -> list[str]:
        ...

    async def create(self, user: User, password: str) -> OperationOutcome:
        """Derive the credential from ``password`` and persist ``user``."""
        ...

    async def add_to_role(self, user: User, role_name: str) -> OperationOutcome:
        ...


class ServiceProviderPort(Protocol):
    """Resolves the services one bootstrap run needs.

    The managers must operate on the database returned by get_database().
    """

    def get_database(self) -> DatabasePort:
        ...

    def get_user_manager(self) -> UserManagerPort:
        ...

    def get_role_manager(self) -> RoleManagerPort:
        ...

    def get_options(self) -> BootstrapOptions:
        ...
