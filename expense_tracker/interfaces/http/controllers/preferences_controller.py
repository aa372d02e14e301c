# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from expense_tracker.application.use_cases.preferences import (
    GetPreferencesUseCase,
    UpdatePreferencesUseCase,
)
from expense_tracker.infrastructure.auth import AuthGuard, current_user_id
from expense_tracker.interfaces.http.dto.preferences import PreferencesUpdateDTO
from expense_tracker.shared.errors.validation import raise_validation_error
from expense_tracker.shared.logging import logger


class PreferencesController:
    def __init__(
        self,
        *,
        get_use_case: GetPreferencesUseCase,
        update_use_case: UpdatePreferencesUseCase,
        guard: AuthGuard,
    ) -> None:
        self._get = get_use_case
        self._update = update_use_case
        self._guard = guard

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("preferences", __name__, url_prefix="/api/user")
        bp.add_url_rule(
            "/preferences",
            view_func=self._guard.required(self.get_preferences),
            methods=["GET"],
            endpoint="preferences_get",
        )
        bp.add_url_rule(
            "/preferences",
            view_func=self._guard.required(self.update_preferences),
            methods=["PUT"],
            endpoint="preferences_set",
        )
        return bp

    def get_preferences(self) -> Response:
        prefs = self._get.execute(current_user_id())
        return jsonify(prefs.to_dict())

    def update_preferences(self) -> Response:
        try:
            dto = PreferencesUpdateDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = current_user_id()
        changes = dto.changes()
        prefs = self._update.execute(user_id, changes)
        logger.info(f"preferences.update: user_id={user_id} fields={sorted(changes)}")
        return jsonify(prefs.to_dict())
