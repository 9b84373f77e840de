from pydantic import BaseModel, Field

DEFAULT_USER_NAME_CHARACTERS = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@+"
)


class PasswordRules(BaseModel):
    min_length: int = Field(default=6, ge=1)
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True

class UserNameRules(BaseModel):
    allowed_characters: str = DEFAULT_USER_NAME_CHARACTERS

class BootstrapRules(BaseModel):
    enabled: bool = True
    admin_role: str = "admin"
    admin_display_name: str = "Administrator"

class Rules(BaseModel):
    password: PasswordRules = Field(default_factory=PasswordRules)
    user_name: UserNameRules = Field(default_factory=UserNameRules)
    bootstrap: BootstrapRules = Field(default_factory=BootstrapRules)
