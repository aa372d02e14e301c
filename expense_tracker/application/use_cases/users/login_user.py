# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from expense_tracker.domain.users.entities import User
from expense_tracker.domain.users.exceptions import InvalidCredentialsError
from expense_tracker.domain.users.repositories import (
    PasswordHasher,
    TokenService,
    UserRepository,
)
from expense_tracker.shared.logging import logger


class LoginUserUseCase:
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
        self._dummy_hash: str | None = None

    def _unknown_user_hash(self) -> str:
        # Verified for unknown identifiers so both failure paths cost one hash check
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash("dummy-password-never-matches")
        return self._dummy_hash

    def execute(self, identifier: str, password: str) -> tuple[User, str]:
        login = identifier.strip().lower()
        user = self._users.find_by_login(login)

        if user is None:
            self._password_hasher.verify(password, self._unknown_user_hash())
            logger.info("auth.login: rejected (unknown identifier)")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: rejected (bad password) user_id={user.id}")
            raise InvalidCredentialsError()

        now = datetime.now(UTC)
        self._users.touch_last_login(user.id, now)
        token = self._tokens.issue(user.id)
        logger.info(f"auth.login: ok user_id={user.id}")
        # lastLogin in the response is the previous login, read before the update
        return user, token.token
