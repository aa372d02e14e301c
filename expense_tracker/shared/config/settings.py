# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///expense_tracker.db", alias="DATABASE_URL")
    pool_size: int = Field(20, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(2.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    init_retries: int = Field(5, ge=1, alias="DATABASE_INIT_RETRIES")
    init_retry_delay: float = Field(5.0, ge=0.0, alias="DATABASE_INIT_RETRY_DELAY")

    model_config = _ENV

    @field_validator("url", mode="after")
    @classmethod
    def _normalize_postgres_scheme(cls, value: str) -> str:
        # Hosted Postgres providers hand out postgres:// URLs
        if value.startswith("postgres://"):
            return "postgresql+psycopg://" + value[len("postgres://") :]
        if value.startswith("postgresql://"):
            return "postgresql+psycopg://" + value[len("postgresql://") :]
        return value

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")
    service_name: str = Field("expense-tracker", alias="SERVICE_NAME")

    model_config = _ENV

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class SecurityConfig(BaseSettings):
    # Cookie sessions
    auth_cookie_enabled: bool = Field(True, alias="AUTH_COOKIE_ENABLED")
    auth_cookie_name: str = Field("token", alias="AUTH_COOKIE_NAME")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["http://localhost:3000"], alias="ALLOWED_ORIGINS"
    )

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    auth_rate_limit_requests: int = Field(5, ge=1, alias="AUTH_RL_LIMIT")
    auth_rate_limit_window: float = Field(15 * 60.0, gt=0, alias="AUTH_RL_WINDOW")
    api_rate_limit_requests: int = Field(100, ge=1, alias="API_RL_LIMIT")
    api_rate_limit_window: float = Field(15 * 60.0, gt=0, alias="API_RL_WINDOW")
    rate_limit_max_keys: int = Field(10_000, ge=1, alias="RL_MAX_KEYS")
    trust_forwarded_for: bool = Field(False, alias="TRUST_FORWARDED_FOR")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _ENV

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator(
        "auth_cookie_enabled",
        "cookie_secure",
        "enable_rate_limit",
        "trust_forwarded_for",
        "enable_hsts",
        mode="before",
    )
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


_INSECURE_SECRETS = ("dev", "development", "test", "changeme")


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    jwt_secret: str = Field("dev", alias="JWT_SECRET")
    token_ttl_seconds: int = Field(7 * 24 * 60 * 60, ge=60, alias="JWT_EXPIRES_IN")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(5000, alias="PORT")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @field_validator("jwt_secret", mode="after")
    @classmethod
    def _require_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return value

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.jwt_secret in _INSECURE_SECRETS or len(self.jwt_secret) < 32:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure JWT_SECRET detected in production!\n"
                "   JWT_SECRET must be a strong random value (32+ characters).\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(48))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if self.security.auth_cookie_enabled and not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_rate_limit:
            warnings.append("⚠️  Rate limiting is DISABLED")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "load_config",
]
