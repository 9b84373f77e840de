"""Bootstrap component for startup provisioning of the identity store.

Ensures the schema, the admin role and the default admin account exist.
"""

from .component import (
    ADMIN_DISPLAY_NAME,
    ADMIN_ROLE,
    create_admin_user,
    ensure_admin_account,
    ensure_role,
    ensure_schema,
    initialize_identity_db,
    read_status,
    report,
)
from .models import BootstrapOptions, IdentityStatus
from .ports import RoleManagerPort, ServiceProviderPort, UserManagerPort

__all__ = [
    # Entry points
    "initialize_identity_db",
    "read_status",
    # Steps
    "ensure_schema",
    "ensure_role",
    "ensure_admin_account",
    "create_admin_user",
    "report",
    # Constants
    "ADMIN_ROLE",
    "ADMIN_DISPLAY_NAME",
    # Models
    "BootstrapOptions",
    "IdentityStatus",
    # Ports
    "RoleManagerPort",
    "ServiceProviderPort",
    "UserManagerPort",
]
