# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transaction scope shared by the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from expense_tracker.shared.errors import PersistenceUnavailableError
from expense_tracker.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a session committed on success and rolled back on error.

    Connectivity failures, whether raised while opening, querying or
    committing, surface as ``PersistenceUnavailableError`` (503).
    """

    try:
        session = factory()
    except (OperationalError, InterfaceError) as exc:
        logger.error(f"uow: cannot open session ({type(exc).__name__})")
        raise PersistenceUnavailableError() from exc

    try:
        yield session
        session.commit()
    except (OperationalError, InterfaceError) as exc:
        session.rollback()
        logger.error(f"uow: database unavailable ({type(exc).__name__})")
        raise PersistenceUnavailableError() from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]
