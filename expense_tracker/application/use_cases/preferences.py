# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from expense_tracker.domain.users.entities import UserPreferences
from expense_tracker.domain.users.repositories import PreferencesRepository


class GetPreferencesUseCase:
    def __init__(self, *, preferences: PreferencesRepository) -> None:
        self._preferences = preferences

    def execute(self, user_id: str) -> UserPreferences:
        return self._preferences.get(user_id) or UserPreferences()


class UpdatePreferencesUseCase:
    def __init__(self, *, preferences: PreferencesRepository) -> None:
        self._preferences = preferences

    def execute(self, user_id: str, changes: dict[str, object]) -> UserPreferences:
        current = self._preferences.get(user_id) or UserPreferences()
        return self._preferences.save(user_id, current.merged(changes))


__all__ = ["GetPreferencesUseCase", "UpdatePreferencesUseCase"]
