from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


def normalize_name(name: str) -> str:
    """Uppercase key used for case-insensitive uniqueness of user and role names."""
    return name.strip().upper()


# --- Roles ---

class Role(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)


# --- Users ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_name: str
    display_name: str = ""
    password_hash: str | None = None
    roles: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def normalized_user_name(self) -> str:
        return normalize_name(self.user_name)


# --- Operation outcomes ---

class IdentityError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    description: str


class OperationOutcome(BaseModel):
    """Result of a mutating identity operation.

    Errors keep the order in which the validators or the store produced them.
    """

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    errors: tuple[IdentityError, ...] = ()

    @classmethod
    def success(cls) -> OperationOutcome:
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> OperationOutcome:
        return cls(succeeded=False, errors=tuple(errors))
