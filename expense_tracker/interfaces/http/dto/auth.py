from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from expense_tracker.domain.users.entities import User

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_.\-]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    display_name: str | None = Field(None, alias="displayName", max_length=128)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("missing", "Username cannot be empty", {})
        if not _USERNAME_RE.match(value):
            raise PydanticCustomError(
                "username_invalid_chars",
                "Username may contain only letters, digits, '.', '_' and '-'",
                {"pattern": _USERNAME_RE.pattern},
            )
        return value.lower()

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_RE.match(value):
            raise PydanticCustomError("email_invalid", "Email address is not valid", {})
        return value.lower()

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class LoginRequestDTO(BaseModel):
    identifier: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    model_config = ConfigDict(extra="forbid")

    @field_validator("identifier")
    @classmethod
    def normalize_identifier(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise PydanticCustomError("missing", "Username or email is required", {})
        return value


class UserDTO(BaseModel):
    id: str
    username: str
    email: str
    display_name: str = Field(serialization_alias="displayName")
    avatar: str | None = None
    last_login: datetime | None = Field(None, serialization_alias="lastLogin")

    @classmethod
    def from_user(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            display_name=user.display_name,
            avatar=user.avatar_url,
            last_login=user.last_login,
        )


class AuthSuccessDTO(BaseModel):
    user: UserDTO
    token: str


class SessionDTO(BaseModel):
    authenticated: bool
    user: UserDTO | None = None
