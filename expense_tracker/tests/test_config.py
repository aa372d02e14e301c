from __future__ import annotations

import pytest
from pydantic import ValidationError

from expense_tracker.shared.config import AppConfig, DatabaseConfig, SecurityConfig


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("JWT_EXPIRES_IN", "3600")
    monkeypatch.setenv("AUTH_RL_LIMIT", "7")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")

    config = AppConfig()  # type: ignore[call-arg]

    assert config.jwt_secret == "from-env"
    assert config.token_ttl_seconds == 3600
    assert config.security.auth_rate_limit_requests == 7
    assert config.security.allowed_origins == ["https://a.example", "https://b.example"]


def test_blank_secret_fails_fast() -> None:
    with pytest.raises(ValidationError):
        AppConfig(jwt_secret="   ")


def test_weak_secret_aborts_in_production() -> None:
    with pytest.raises(SystemExit):
        AppConfig(app_env="production", jwt_secret="dev")


def test_strong_secret_is_accepted_in_production() -> None:
    config = AppConfig(
        app_env="production",
        jwt_secret="x" * 48,
        security=SecurityConfig(cookie_secure=True, enable_hsts=True),
    )

    assert config.is_production()


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgres://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("sqlite:///x.db", "sqlite:///x.db"),
    ],
)
def test_database_url_normalization(url: str, expected: str) -> None:
    assert DatabaseConfig(url=url).url == expected


@pytest.mark.parametrize("raw", ["1", "true", "YES", "on"])
def test_boolean_env_flags(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("TRUST_FORWARDED_FOR", raw)

    assert SecurityConfig().trust_forwarded_for is True  # type: ignore[call-arg]
