# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from expense_tracker.shared.errors.base import AppError


class ExpenseNotFoundError(AppError):
    code = "expense_not_found"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, expense_id: str) -> None:
        super().__init__(context={"expense_id": expense_id})
