"""Bootstrap component data models.

Frozen dataclasses for the provisioning options and the status snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BootstrapOptions:
    """Default administrator credentials, fixed for one startup run."""

    default_admin_user_name: str
    default_admin_password: str | None


@dataclass(frozen=True)
class IdentityStatus:
    """Read-only view of what the bootstrap routine would find."""

    schema_current: bool
    pending_migrations: tuple[str, ...]
    admin_role_exists: bool
    admin_user_exists: bool
    admin_user_roles: tuple[str, ...]

    @property
    def provisioned(self) -> bool:
        return self.schema_current and self.admin_role_exists and self.admin_user_exists

    def as_dict(self) -> dict[str, object]:
        return {
            "schema_current": self.schema_current,
            "pending_migrations": list(self.pending_migrations),
            "admin_role_exists": self.admin_role_exists,
            "admin_user_exists": self.admin_user_exists,
            "admin_user_roles": list(self.admin_user_roles),
            "provisioned": self.provisioned,
        }
