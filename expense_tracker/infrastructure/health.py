# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from expense_tracker.infrastructure.db import Database
from expense_tracker.shared.logging import logger


def check_database(database: Database) -> bool:
    try:
        return database.ping()
    except Exception as exc:
        logger.warning(f"health: database check failed ({type(exc).__name__})")
        return False


__all__ = ["check_database"]
