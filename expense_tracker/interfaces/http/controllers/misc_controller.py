# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, Response, jsonify

from expense_tracker.domain.expenses.entities import CATEGORIES
from expense_tracker.infrastructure.db import Database
from expense_tracker.infrastructure.health import check_database


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/api/categories", view_func=self.categories, methods=["GET"])
        return bp

    def health(self) -> tuple[Response, int]:
        database_ok = check_database(self._database)
        status = {
            "status": "ok" if database_ok else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "ok" if database_ok else "unavailable",
        }
        return jsonify(status), 200 if database_ok else 503

    def categories(self) -> Response:
        return jsonify(list(CATEGORIES))
