# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from expense_tracker.application.use_cases.expenses import (
    CreateExpenseUseCase,
    DeleteExpenseUseCase,
    ListExpensesUseCase,
    UpdateExpenseUseCase,
)
from expense_tracker.infrastructure.auth import AuthGuard, current_user_id
from expense_tracker.interfaces.http.dto.expenses import ExpenseQueryDTO, ExpenseRequestDTO
from expense_tracker.shared.errors.validation import raise_validation_error


def _parse_body() -> ExpenseRequestDTO:
    try:
        return ExpenseRequestDTO.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class ExpensesController:
    def __init__(
        self,
        *,
        list_use_case: ListExpensesUseCase,
        create_use_case: CreateExpenseUseCase,
        update_use_case: UpdateExpenseUseCase,
        delete_use_case: DeleteExpenseUseCase,
        guard: AuthGuard,
    ) -> None:
        self._list = list_use_case
        self._create = create_use_case
        self._update = update_use_case
        self._delete = delete_use_case
        self._guard = guard

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("expenses", __name__, url_prefix="/api")
        bp.add_url_rule(
            "/expenses",
            view_func=self._guard.required(self.list_expenses),
            methods=["GET"],
            endpoint="expenses_list",
        )
        bp.add_url_rule(
            "/expenses",
            view_func=self._guard.required(self.create_expense),
            methods=["POST"],
            endpoint="expenses_create",
        )
        bp.add_url_rule(
            "/expenses/<expense_id>",
            view_func=self._guard.required(self.update_expense),
            methods=["PUT"],
            endpoint="expenses_update",
        )
        bp.add_url_rule(
            "/expenses/<expense_id>",
            view_func=self._guard.required(self.delete_expense),
            methods=["DELETE"],
            endpoint="expenses_delete",
        )
        return bp

    def list_expenses(self) -> Response:
        try:
            query = ExpenseQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)
        items = self._list.execute(current_user_id(), query.to_query())
        return jsonify([item.to_dict() for item in items])

    def create_expense(self) -> tuple[Response, int]:
        dto = _parse_body()
        expense = self._create.execute(current_user_id(), dto.to_draft())
        return jsonify(expense.to_dict()), 201

    def update_expense(self, expense_id: str) -> Response:
        dto = _parse_body()
        expense = self._update.execute(current_user_id(), expense_id, dto.to_draft())
        return jsonify(expense.to_dict())

    def delete_expense(self, expense_id: str) -> Response:
        self._delete.execute(current_user_id(), expense_id)
        return jsonify({"ok": True})
