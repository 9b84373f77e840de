"""Bootstrap component implementation.

Provisions the identity store at process startup: makes sure the schema
exists, makes sure the admin role exists, and makes sure the default admin
account exists. Each step is create-if-absent, so the routine is safe to
run on every start.

Role membership is only added right after the account is created. An
account that already exists is left untouched, even if it lost (or never
had) the admin role.
"""

from __future__ import annotations

import logging

from identity_bootstrap.domain.entities import OperationOutcome, Role, User
from identity_bootstrap.ports.identity import DatabasePort

from .models import BootstrapOptions, IdentityStatus
from .ports import RoleManagerPort, ServiceProviderPort, UserManagerPort

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
ADMIN_DISPLAY_NAME = "Administrator"


def report(label: str, outcome: OperationOutcome, log: logging.Logger = logger) -> None:
    """Log one result line for ``label`` and, on failure, one line per error."""
    if outcome.succeeded:
        log.info("%s: Result = Success", label)
        return

    log.warning("%s: Result = Failed", label)
    for error in outcome.errors:
        log.warning("--> %s: %s", error.code, error.description)


async def ensure_schema(database: DatabasePort, log: logging.Logger = logger) -> bool:
    """Create the identity tables if needed. Storage errors propagate."""
    log.debug("ensure_schema: Ensuring database exists")
    created = await database.ensure_created()
    if created:
        log.info("ensure_schema: Database schema created")
    else:
        log.debug("ensure_schema: Database schema already current")
    return created


async def ensure_role(
    role_manager: RoleManagerPort,
    name: str,
    log: logging.Logger = logger,
) -> OperationOutcome | None:
    """Create role ``name`` if it is missing.

    Returns the creation outcome, or None when the role already existed.
    A failed creation is reported and returned, never raised.
    """
    log.debug("ensure_role: Ensuring role %s exists", name)
    if await role_manager.role_exists(name):
        log.debug("ensure_role: Role %s exists", name)
        return None

    log.debug("ensure_role: Role %s does not exist - creating", name)
    outcome = await role_manager.create(Role(name=name))
    report("ensure_role: Role Creation", outcome, log)
    return outcome


async def ensure_admin_account(
    user_manager: UserManagerPort,
    role_name: str,
    username: str,
    display_name: str,
    password: str,
    log: logging.Logger = logger,
) -> None:
    log.debug("ensure_admin_account: Ensuring user %s exists", username)
    user = await user_manager.find_by_name(username)
    if user is not None:
        log.debug("ensure_admin_account: User %s already exists", username)
        return

    log.debug("ensure_admin_account: User %s does not exist - creating", username)
    user = User(user_name=username, display_name=display_name)
    creation = await user_manager.create(user, password)
    report("ensure_admin_account: User Creation", creation, log)
    if not creation.succeeded:
        return

    log.debug("ensure_admin_account: Adding new user to role %s", role_name)
    addition = await user_manager.add_to_role(user, role_name)
    report("ensure_admin_account: Role Addition", addition, log)


async def create_admin_user(
    provider: ServiceProviderPort,
    admin_role: str = ADMIN_ROLE,
    admin_display_name: str = ADMIN_DISPLAY_NAME,
    log: logging.Logger = logger,
) -> None:
    options: BootstrapOptions = provider.get_options()

    await ensure_role(provider.get_role_manager(), admin_role, log)

    if not options.default_admin_password:
        log.warning(
            "create_admin_user: No default admin password configured; "
            "skipping account for %s",
            options.default_admin_user_name,
        )
        return

    await ensure_admin_account(
        provider.get_user_manager(),
        admin_role,
        options.default_admin_user_name,
        admin_display_name,
        options.default_admin_password,
        log,
    )


async def initialize_identity_db(
    provider: ServiceProviderPort,
    admin_role: str = ADMIN_ROLE,
    admin_display_name: str = ADMIN_DISPLAY_NAME,
    log: logging.Logger = logger,
) -> None:
    """Run the whole provisioning sequence inside one database scope.

    The database is closed on every exit path, including when a step raises.
    """
    async with provider.get_database() as database:
        await ensure_schema(database, log)
        await create_admin_user(provider, admin_role, admin_display_name, log)


async def read_status(
    provider: ServiceProviderPort,
    admin_role: str = ADMIN_ROLE,
) -> IdentityStatus:
    """Inspect the store without changing it."""
    options = provider.get_options()
    async with provider.get_database() as database:
        pending = tuple(await database.pending_migrations())
        if pending:
            return IdentityStatus(
                schema_current=False,
                pending_migrations=pending,
                admin_role_exists=False,
                admin_user_exists=False,
                admin_user_roles=(),
            )

        role_exists = await provider.get_role_manager().role_exists(admin_role)
        user = await provider.get_user_manager().find_by_name(options.default_admin_user_name)
        return IdentityStatus(
            schema_current=True,
            pending_migrations=(),
            admin_role_exists=role_exists,
            admin_user_exists=user is not None,
            admin_user_roles=tuple(user.roles) if user else (),
        )
