# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .amount_expression import evaluate_amount
from .entities import CATEGORIES, DEFAULT_CATEGORY, Expense, ExpenseDraft, ExpenseQuery
from .exceptions import ExpenseNotFoundError

__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "Expense",
    "ExpenseDraft",
    "ExpenseNotFoundError",
    "ExpenseQuery",
    "evaluate_amount",
]
