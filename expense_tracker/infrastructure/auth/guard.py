# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Request authentication for Flask views.

``AuthGuard.required`` rejects a request with 401 before the view runs
unless it carries a valid token for an existing user; ``AuthGuard.optional``
resolves the user when it can and otherwise lets the request through
anonymously. Either way the outcome is exposed as ``g.user_id``.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from expense_tracker.domain.users.exceptions import (
    AuthError,
    MissingTokenError,
    UnknownUserError,
)
from expense_tracker.domain.users.repositories import TokenService, UserRepository
from expense_tracker.infrastructure.observability import AUTH_FAILURES
from expense_tracker.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])


def extract_token(cookie_name: str | None) -> str:
    auth = request.headers.get("Authorization", "")
    if auth[:7].lower() == "bearer ":
        token = auth[7:].strip()
        if token:
            return token
    if cookie_name:
        return request.cookies.get(cookie_name, "")
    return ""


def current_user_id() -> str:
    """Return the authenticated user id; only valid inside a guarded view."""

    user_id = getattr(g, "user_id", None)
    if not user_id:
        raise RuntimeError("current_user_id() called outside an authenticated request")
    return cast(str, user_id)


class AuthGuard:
    def __init__(
        self,
        *,
        tokens: TokenService,
        users: UserRepository,
        cookie_name: str | None = None,
    ) -> None:
        self._tokens = tokens
        self._users = users
        self._cookie_name = cookie_name

    def authenticate(self) -> str:
        token = extract_token(self._cookie_name)
        if not token:
            raise MissingTokenError()
        user_id = self._tokens.verify(token)
        if self._users.find_by_id(user_id) is None:
            raise UnknownUserError()
        return user_id

    def required(self, view: F) -> F:
        @wraps(view)
        def inner(*args, **kwargs):
            g.user_id = None
            try:
                g.user_id = self.authenticate()
            except AuthError as exc:
                AUTH_FAILURES.labels(kind=exc.kind).inc()
                logger.warning(
                    f"Auth failed ({exc.kind}) on {request.method} {request.path} "
                    f"from {request.remote_addr}"
                )
                raise
            logger.debug(f"Auth OK: user={g.user_id} {request.method} {request.path}")
            return view(*args, **kwargs)

        return cast(F, inner)

    def optional(self, view: F) -> F:
        @wraps(view)
        def inner(*args, **kwargs):
            g.user_id = None
            try:
                g.user_id = self.authenticate()
            except MissingTokenError:
                pass
            except AuthError as exc:
                AUTH_FAILURES.labels(kind=exc.kind).inc()
                logger.debug(f"Optional auth ignored ({exc.kind}) on {request.path}")
            return view(*args, **kwargs)

        return cast(F, inner)
