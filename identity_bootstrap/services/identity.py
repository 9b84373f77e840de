import asyncio
import logging

from identity_bootstrap.domain.entities import OperationOutcome, Role, User, normalize_name
from identity_bootstrap.domain.errors import IdentityErrorCode, RoleNotFoundError, identity_error
from identity_bootstrap.ports.identity import PasswordHasherPort, RoleStorePort, UserStorePort
from identity_bootstrap.services.validators import PasswordValidator, RoleValidator, UserValidator

logger = logging.getLogger(__name__)


class RoleManager:
    def __init__(self, store: RoleStorePort, validator: RoleValidator | None = None):
        self.store = store
        self.validator = validator or RoleValidator(store)

    async def role_exists(self, name: str) -> bool:
        return await self.store.find_by_name(name) is not None

    async def find_by_name(self, name: str) -> Role | None:
        return await self.store.find_by_name(name)

    async def create(self, role: Role) -> OperationOutcome:
        errors = await self.validator.validate(role)
        if errors:
            return OperationOutcome.failed(*errors)
        return await self.store.create(role)


class UserManager:
    def __init__(
        self,
        store: UserStorePort,
        role_store: RoleStorePort,
        hasher: PasswordHasherPort,
        password_validator: PasswordValidator,
        user_validator: UserValidator,
    ):
        self.store = store
        self.role_store = role_store
        self.hasher = hasher
        self.password_validator = password_validator
        self.user_validator = user_validator

    async def find_by_name(self, user_name: str) -> User | None:
        return await self.store.find_by_name(user_name)

    async def get_roles(self, user: User) -> list[str]:
        return await self.store.get_roles(user.id)

    async def create(self, user: User, password: str) -> OperationOutcome:
        """Validate, hash the password into ``user.password_hash`` and persist."""
        errors = await self.user_validator.validate(user)
        errors.extend(self.password_validator.validate(password))
        if errors:
            return OperationOutcome.failed(*errors)

        # Hashing is CPU bound and must not block the event loop
        user.password_hash = await asyncio.to_thread(self.hasher.hash_password, password)
        return await self.store.create(user)

    async def add_to_role(self, user: User, role_name: str) -> OperationOutcome:
        """Add a membership. Raises RoleNotFoundError when the role is absent."""
        role = await self.role_store.find_by_normalized_name(normalize_name(role_name))
        if role is None:
            raise RoleNotFoundError(role_name)

        current = await self.store.get_roles(user.id)
        if role.name in current:
            return OperationOutcome.failed(identity_error(
                IdentityErrorCode.USER_ALREADY_IN_ROLE,
                f"User already in role '{role_name}'.",
            ))

        outcome = await self.store.add_to_role(user.id, role.id)
        if outcome.succeeded:
            user.roles.append(role.name)
            logger.debug("Added %s to role %s", user.user_name, role.name)
        return outcome
