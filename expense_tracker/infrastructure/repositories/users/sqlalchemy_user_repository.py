# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from expense_tracker.domain.users.entities import User as DomainUser
from expense_tracker.domain.users.entities import UserPreferences as DomainPreferences
from expense_tracker.domain.users.exceptions import UserAlreadyExistsError
from expense_tracker.domain.users.repositories import PreferencesRepository, UserRepository
from expense_tracker.infrastructure.db.models import User, UserPreferences
from expense_tracker.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        display_name=row.display_name,
        avatar_url=row.avatar_url,
        last_login=row.last_login,
        created_at=row.created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_login(self, identifier: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(User)
                .filter(or_(User.username == identifier, User.email == identifier))
                .first()
            )
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def exists(self, *, username: str, email: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(User.id)
                .filter(or_(User.username == username, User.email == email))
                .first()
            )
            return row is not None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    id=user.id,
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    display_name=user.display_name,
                    avatar_url=user.avatar_url,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same name
            raise UserAlreadyExistsError() from exc

    def touch_last_login(self, user_id: str, at: datetime) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            session.query(User).filter(User.id == user_id).update({User.last_login: at})


class SqlAlchemyPreferencesRepository(PreferencesRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, user_id: str) -> DomainPreferences | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(UserPreferences, user_id)
            if not row:
                return None
            return DomainPreferences(
                theme=row.theme,
                currency=row.currency,
                notifications=bool(row.notifications),
                language=row.language,
            )

    def save(self, user_id: str, preferences: DomainPreferences) -> DomainPreferences:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(UserPreferences, user_id)
            if row is None:
                row = UserPreferences(user_id=user_id)
                session.add(row)
            row.theme = preferences.theme
            row.currency = preferences.currency
            row.notifications = preferences.notifications
            row.language = preferences.language
        return preferences
