from identity_bootstrap.domain.entities import IdentityError, Role, User
from identity_bootstrap.domain.errors import IdentityErrorCode, identity_error
from identity_bootstrap.ports.identity import RoleStorePort, UserStorePort
from identity_bootstrap.rules.models import PasswordRules, UserNameRules


class PasswordValidator:
    """Checks a plaintext password against the configured policy.

    Every unmet requirement produces its own error, always in the order
    length, non-alphanumeric, digit, lowercase, uppercase.
    """

    def __init__(self, rules: PasswordRules):
        self.rules = rules

    def validate(self, password: str) -> list[IdentityError]:
        errors: list[IdentityError] = []
        rules = self.rules

        if len(password) < rules.min_length:
            errors.append(identity_error(
                IdentityErrorCode.PASSWORD_TOO_SHORT,
                f"Passwords must be at least {rules.min_length} characters.",
            ))
        if rules.require_non_alphanumeric and all(ch.isalnum() for ch in password):
            errors.append(identity_error(
                IdentityErrorCode.PASSWORD_REQUIRES_NON_ALPHANUMERIC,
                "Passwords must have at least one non alphanumeric character.",
            ))
        if rules.require_digit and not any("0" <= ch <= "9" for ch in password):
            errors.append(identity_error(
                IdentityErrorCode.PASSWORD_REQUIRES_DIGIT,
                "Passwords must have at least one digit ('0'-'9').",
            ))
        if rules.require_lowercase and not any("a" <= ch <= "z" for ch in password):
            errors.append(identity_error(
                IdentityErrorCode.PASSWORD_REQUIRES_LOWER,
                "Passwords must have at least one lowercase ('a'-'z').",
            ))
        if rules.require_uppercase and not any("A" <= ch <= "Z" for ch in password):
            errors.append(identity_error(
                IdentityErrorCode.PASSWORD_REQUIRES_UPPER,
                "Passwords must have at least one uppercase ('A'-'Z').",
            ))
        return errors


class UserValidator:
    def __init__(self, rules: UserNameRules, store: UserStorePort):
        self.rules = rules
        self.store = store

    async def validate(self, user: User) -> list[IdentityError]:
        name = user.user_name
        allowed = self.rules.allowed_characters
        if not name.strip() or any(ch not in allowed for ch in name):
            return [identity_error(
                IdentityErrorCode.INVALID_USER_NAME,
                f"Username '{name}' is invalid, can only contain letters or digits.",
            )]

        existing = await self.store.find_by_normalized_name(user.normalized_user_name)
        if existing is not None and existing.id != user.id:
            return [identity_error(
                IdentityErrorCode.DUPLICATE_USER_NAME,
                f"Username '{name}' is already taken.",
            )]
        return []


class RoleValidator:
    def __init__(self, store: RoleStorePort):
        self.store = store

    async def validate(self, role: Role) -> list[IdentityError]:
        if not role.name.strip():
            return [identity_error(
                IdentityErrorCode.INVALID_ROLE_NAME,
                f"Role name '{role.name}' is invalid.",
            )]

        existing = await self.store.find_by_normalized_name(role.normalized_name)
        if existing is not None and existing.id != role.id:
            return [identity_error(
                IdentityErrorCode.DUPLICATE_ROLE_NAME,
                f"Role name '{role.name}' is already taken.",
            )]
        return []
