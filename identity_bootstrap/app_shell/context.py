from __future__ import annotations

import logging
from dataclasses import dataclass

from identity_bootstrap.adapters.auth.crypto import Argon2PasswordHasher
from identity_bootstrap.adapters.sqlite.database import IdentityDatabase
from identity_bootstrap.adapters.sqlite.stores import SQLiteRoleStore, SQLiteUserStore
from identity_bootstrap.app_shell.config import Settings
from identity_bootstrap.components.bootstrap import (
    BootstrapOptions,
    IdentityStatus,
    ensure_schema,
    initialize_identity_db,
    read_status,
)
from identity_bootstrap.ports.identity import PasswordHasherPort
from identity_bootstrap.rules.models import Rules
from identity_bootstrap.services.identity import RoleManager, UserManager
from identity_bootstrap.services.validators import (
    PasswordValidator,
    RoleValidator,
    UserValidator,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """One startup scope: a database handle plus the managers bound to it."""

    settings: Settings
    rules: Rules
    database: IdentityDatabase
    user_manager: UserManager
    role_manager: RoleManager

    @classmethod
    def create(
        cls,
        settings: Settings,
        rules: Rules,
        hasher: PasswordHasherPort | None = None,
    ) -> ServiceContext:
        database = IdentityDatabase(settings.db_path)

        # Adapters
        user_store = SQLiteUserStore(database)
        role_store = SQLiteRoleStore(database)

        # Services
        role_manager = RoleManager(role_store, RoleValidator(role_store))
        user_manager = UserManager(
            user_store,
            role_store,
            hasher or Argon2PasswordHasher(),
            PasswordValidator(rules.password),
            UserValidator(rules.user_name, user_store),
        )

        return cls(
            settings=settings,
            rules=rules,
            database=database,
            user_manager=user_manager,
            role_manager=role_manager,
        )

    # --- Service provider ---

    def get_database(self) -> IdentityDatabase:
        return self.database

    def get_user_manager(self) -> UserManager:
        return self.user_manager

    def get_role_manager(self) -> RoleManager:
        return self.role_manager

    def get_options(self) -> BootstrapOptions:
        return BootstrapOptions(
            default_admin_user_name=self.settings.admin_user_name,
            default_admin_password=self.settings.admin_password,
        )

    # --- Entry points ---

    async def bootstrap(self) -> None:
        boot = self.rules.bootstrap
        if not boot.enabled:
            logger.info("Admin bootstrap disabled in rules; ensuring schema only")
            async with self.database as database:
                await ensure_schema(database)
            return

        await initialize_identity_db(
            self,
            admin_role=boot.admin_role,
            admin_display_name=boot.admin_display_name,
        )

    async def status(self) -> IdentityStatus:
        return await read_status(self, admin_role=self.rules.bootstrap.admin_role)
