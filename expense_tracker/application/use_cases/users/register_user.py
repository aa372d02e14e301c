# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from expense_tracker.domain.users.entities import NewUser, User
from expense_tracker.domain.users.exceptions import UserAlreadyExistsError
from expense_tracker.domain.users.repositories import (
    PasswordHasher,
    TokenService,
    UserRepository,
)
from expense_tracker.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, new_user: NewUser) -> tuple[User, str]:
        if self._users.exists(username=new_user.username, email=new_user.email):
            raise UserAlreadyExistsError()
        now = datetime.now(UTC)
        hashed = self._password_hasher.hash(new_user.password)
        user = User(
            id=str(uuid.uuid4()),
            username=new_user.username,
            email=new_user.email,
            password_hash=hashed,
            display_name=new_user.display_name,
            created_at=now,
        )
        persisted = self._users.add(user)
        token = self._tokens.issue(persisted.id)
        logger.info(f"auth.register: ok user_id={persisted.id}")
        return persisted, token.token
