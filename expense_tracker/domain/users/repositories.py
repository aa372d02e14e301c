# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import IssuedToken, User, UserPreferences


class UserRepository(Protocol):
    def find_by_login(self, identifier: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def exists(self, *, username: str, email: str) -> bool: ...
    def add(self, user: User) -> User: ...
    def touch_last_login(self, user_id: str, at: datetime) -> None: ...


class PreferencesRepository(Protocol):
    def get(self, user_id: str) -> UserPreferences | None: ...
    def save(self, user_id: str, preferences: UserPreferences) -> UserPreferences: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, user_id: str) -> IssuedToken: ...
    def verify(self, token: str) -> str: ...
