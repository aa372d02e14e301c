# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from expense_tracker.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class AuthError(DomainError):
    """Bearer token rejected.

    Every subclass serializes to the same body so clients cannot tell which
    check failed; ``kind`` is for logs and metrics only.
    """

    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
    kind = "unauthorized"


class MissingTokenError(AuthError):
    kind = "missing_token"


class InvalidTokenError(AuthError):
    kind = "invalid_token"


class ExpiredTokenError(AuthError):
    kind = "expired_token"


class UnknownUserError(AuthError):
    kind = "unknown_user"
