# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_fixed

from expense_tracker.shared.config import DatabaseConfig
from expense_tracker.shared.logging import logger


class Base(DeclarativeBase):
    pass


def build_engine(config: DatabaseConfig) -> Engine:
    kwargs: dict[str, object] = {"echo": False, "future": True, "pool_pre_ping": True}
    if config.is_sqlite():
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(config.pool_timeout) or 1,
        }
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            connect_args={"connect_timeout": max(1, int(config.pool_timeout))},
        )
    return create_engine(config.url, **kwargs)


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        f"db.init: attempt {state.attempt_number} failed ({type(exc).__name__}: {exc}), retrying"
    )


class Database:
    """Process-scoped engine and session factory."""

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self.engine: Engine = build_engine(config)
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )
        self.ready = False

    def init_schema(self) -> None:
        # Importing models registers the tables on Base.metadata
        from expense_tracker.infrastructure.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        self.ready = True
        logger.info("Database schema ensured")

    def init_schema_with_retry(self) -> bool:
        retrying = Retrying(
            stop=stop_after_attempt(self._config.init_retries),
            wait=wait_fixed(self._config.init_retry_delay),
            before_sleep=_log_retry,
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    logger.info(
                        f"db.init: attempt {attempt.retry_state.attempt_number}"
                        f"/{self._config.init_retries}"
                    )
                    self.init_schema()
        except Exception:
            logger.exception("db.init: failed after all retries, serving without database")
            return False
        return True

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("db.engine: disposed")
