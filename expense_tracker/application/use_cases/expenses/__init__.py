# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .manage_expenses import (
    CreateExpenseUseCase,
    DeleteExpenseUseCase,
    ListExpensesUseCase,
    UpdateExpenseUseCase,
)

__all__ = [
    "CreateExpenseUseCase",
    "DeleteExpenseUseCase",
    "ListExpensesUseCase",
    "UpdateExpenseUseCase",
]
