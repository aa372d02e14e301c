from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from expense_tracker.application.services.tokens import JwtTokenService
from expense_tracker.domain.users.exceptions import ExpiredTokenError, InvalidTokenError

SECRET = "unit-test-secret-0123456789abcdef"


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_issue_then_verify_returns_subject() -> None:
    service = JwtTokenService(SECRET, ttl_seconds=3600)

    issued = service.issue("user-1")

    assert issued.user_id == "user-1"
    assert service.verify(issued.token) == "user-1"


def test_expires_at_follows_ttl() -> None:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    service = JwtTokenService(SECRET, ttl_seconds=600, clock=FakeClock(start))

    issued = service.issue("user-1")

    assert issued.expires_at == start + timedelta(seconds=600)


def test_expired_token_is_rejected() -> None:
    issued_at = datetime.now(UTC) - timedelta(hours=2)
    issuer = JwtTokenService(SECRET, ttl_seconds=3600, clock=FakeClock(issued_at))
    token = issuer.issue("user-1").token

    with pytest.raises(ExpiredTokenError):
        JwtTokenService(SECRET, ttl_seconds=3600).verify(token)


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = JwtTokenService("another-secret-0123456789abcdef", ttl_seconds=3600).issue("u").token

    with pytest.raises(InvalidTokenError):
        JwtTokenService(SECRET, ttl_seconds=3600).verify(token)


def test_tampered_payload_is_rejected() -> None:
    service = JwtTokenService(SECRET, ttl_seconds=3600)
    header, _, signature = service.issue("user-1").token.split(".")
    forged = jwt.encode(
        {"sub": "admin", "iat": 0, "exp": 4102444800}, "guess", algorithm="HS256"
    ).split(".")[1]

    with pytest.raises(InvalidTokenError):
        service.verify(f"{header}.{forged}.{signature}")


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token: str) -> None:
    with pytest.raises(InvalidTokenError):
        JwtTokenService(SECRET, ttl_seconds=3600).verify(token)


def test_token_without_subject_is_rejected() -> None:
    now = int(datetime.now(UTC).timestamp())
    token = jwt.encode({"iat": now, "exp": now + 60}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        JwtTokenService(SECRET, ttl_seconds=3600).verify(token)


def test_unsigned_token_is_rejected() -> None:
    now = int(datetime.now(UTC).timestamp())
    token = jwt.encode({"sub": "user-1", "iat": now, "exp": now + 60}, None, algorithm="none")

    with pytest.raises(InvalidTokenError):
        JwtTokenService(SECRET, ttl_seconds=3600).verify(token)


def test_blank_secret_is_refused() -> None:
    with pytest.raises(ValueError):
        JwtTokenService("", ttl_seconds=3600)


def test_shifted_clock_accepts_its_own_fresh_token() -> None:
    clock = FakeClock(datetime.now(UTC) + timedelta(hours=2))
    service = JwtTokenService(SECRET, ttl_seconds=600, clock=clock)

    assert service.verify(service.issue("user-1").token) == "user-1"


def test_expiry_follows_the_injected_clock() -> None:
    clock = FakeClock(datetime(2020, 1, 1, tzinfo=UTC))
    service = JwtTokenService(SECRET, ttl_seconds=600, clock=clock)
    token = service.issue("user-1").token

    clock.now += timedelta(seconds=599)
    assert service.verify(token) == "user-1"

    clock.now += timedelta(seconds=1)
    with pytest.raises(ExpiredTokenError):
        service.verify(token)


def test_non_numeric_expiry_is_rejected() -> None:
    token = jwt.encode({"sub": "user-1", "iat": 0, "exp": "soon"}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        JwtTokenService(SECRET, ttl_seconds=3600).verify(token)
