"""
Identity error codes and exceptions.

Validation problems are reported as IdentityError values inside an
OperationOutcome. Exceptions are reserved for conditions the caller is not
expected to recover from (missing role on membership, closed database).
"""

from __future__ import annotations

from enum import Enum

from identity_bootstrap.domain.entities import IdentityError


class IdentityErrorCode(str, Enum):
    """Codes attached to failed identity operations."""

    # Store errors
    DEFAULT_ERROR = "DefaultError"

    # User validation
    DUPLICATE_USER_NAME = "DuplicateUserName"
    INVALID_USER_NAME = "InvalidUserName"
    USER_ALREADY_IN_ROLE = "UserAlreadyInRole"

    # Role validation
    DUPLICATE_ROLE_NAME = "DuplicateRoleName"
    INVALID_ROLE_NAME = "InvalidRoleName"

    # Password policy
    PASSWORD_TOO_SHORT = "PasswordTooShort"
    PASSWORD_REQUIRES_NON_ALPHANUMERIC = "PasswordRequiresNonAlphanumeric"
    PASSWORD_REQUIRES_DIGIT = "PasswordRequiresDigit"
    PASSWORD_REQUIRES_LOWER = "PasswordRequiresLower"
    PASSWORD_REQUIRES_UPPER = "PasswordRequiresUpper"


def identity_error(code: IdentityErrorCode, description: str) -> IdentityError:
    return IdentityError(code=code.value, description=description)


def default_error() -> IdentityError:
    return identity_error(IdentityErrorCode.DEFAULT_ERROR, "An unknown failure has occurred.")


class IdentityStoreError(Exception):
    """Base error raised by the identity layer."""


class RoleNotFoundError(IdentityStoreError):
    def __init__(self, role_name: str):
        self.role_name = role_name
        super().__init__(f"Role {role_name} does not exist.")


class DatabaseClosedError(IdentityStoreError):
    def __init__(self) -> None:
        super().__init__("Database is not open; use it inside 'async with'.")
