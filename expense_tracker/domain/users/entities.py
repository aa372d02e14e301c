# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

THEMES: tuple[str, ...] = ("light", "dark")


@dataclass(slots=True, frozen=True)
class User:

    id: str
    username: str
    email: str
    password_hash: str
    display_name: str
    created_at: datetime
    avatar_url: str | None = None
    last_login: datetime | None = None


@dataclass(slots=True, frozen=True)
class IssuedToken:
    """Signed bearer token handed to a client; never persisted."""

    user_id: str
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class UserPreferences:

    theme: str = "light"
    currency: str = "USD"
    notifications: bool = True
    language: str = "en"

    def merged(self, changes: dict[str, object]) -> UserPreferences:
        current = {
            "theme": self.theme,
            "currency": self.currency,
            "notifications": self.notifications,
            "language": self.language,
        }
        current.update({k: v for k, v in changes.items() if v is not None})
        return UserPreferences(**current)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, object]:
        return {
            "theme": self.theme,
            "currency": self.currency,
            "notifications": self.notifications,
            "language": self.language,
        }


@dataclass(slots=True)
class NewUser:
    """Registration input after normalization."""

    username: str
    email: str
    password: str
    display_name: str = field(default="")

    def __post_init__(self) -> None:
        self.username = self.username.strip().lower()
        self.email = self.email.strip().lower()
        self.display_name = (self.display_name or self.username).strip()
