# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup shared by the app factory and the WSGI entry point.

Every record is stamped with the current request's correlation id by a
loguru patcher, so callers log through the plain ``logger`` object.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger

from .sensitive_filter import sanitize_record

_NO_CORRELATION = "-"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default=_NO_CORRELATION)

_LINE = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[correlation_id]} | "
    "{name}:{function}:{line} | {message}"
)
_COLOR_LINE = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <lvl>{level: <8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <lvl>{message}</lvl>"
)

# stdlib loggers that are chatty at DEBUG
_QUIET = {"werkzeug": logging.INFO, "sqlalchemy.engine": logging.WARNING}


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or _NO_CORRELATION)


def get_correlation_id() -> str:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(_NO_CORRELATION)


def _stamp_correlation(record: dict[str, Any]) -> None:
    record["extra"].setdefault("correlation_id", _correlation_id.get())


class _StdlibBridge(logging.Handler):
    """Forwards stdlib records (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str | None = None, *, log_file: str | None = None) -> None:
    """Replace loguru's default sink with the app's stderr (and optional file) sinks."""
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    logger.remove()
    logger.configure(patcher=_stamp_correlation)

    common = {"level": level, "filter": sanitize_record, "backtrace": False, "diagnose": False}
    logger.add(sys.stderr, format=_COLOR_LINE, colorize=True, **common)
    if log_file:
        path = Path(log_file).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(path, format=_LINE, enqueue=True, rotation="10 MB", encoding="utf-8", **common)

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, floor in _QUIET.items():
        logging.getLogger(name).setLevel(floor)


__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
