"""Signed, expiring bearer tokens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from expense_tracker.domain.users.entities import IssuedToken
from expense_tracker.domain.users.exceptions import ExpiredTokenError, InvalidTokenError
from expense_tracker.domain.users.repositories import TokenService

_JWT_ALG = "HS256"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """HS256 JWTs carrying ``sub``/``iat``/``exp``.

    Nothing is stored server-side, so rotating ``secret`` is the only way to
    invalidate outstanding tokens.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("jwt_secret_blank")
        self._secret = secret
        self._ttl = timedelta(seconds=max(1, int(ttl_seconds)))
        self._clock = clock

    def issue(self, user_id: str) -> IssuedToken:
        if not user_id:
            raise ValueError("user_id_blank")
        now = self._clock()
        expires_at = now + self._ttl
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=_JWT_ALG)
        return IssuedToken(user_id=str(user_id), token=token, expires_at=expires_at)

    def verify(self, token: str) -> str:
        if not token:
            raise InvalidTokenError()
        try:
            # Time claims are checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_JWT_ALG],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidTokenError()
        if self._clock().timestamp() >= exp:
            raise ExpiredTokenError()

        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise InvalidTokenError()
        return sub
