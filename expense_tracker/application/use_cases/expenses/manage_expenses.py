# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-cases for a user's own expense records."""

from __future__ import annotations

from collections.abc import Sequence

from expense_tracker.domain.expenses.entities import Expense, ExpenseDraft, ExpenseQuery
from expense_tracker.domain.expenses.exceptions import ExpenseNotFoundError
from expense_tracker.domain.expenses.repositories import ExpenseRepository
from expense_tracker.shared.logging import logger


class ListExpensesUseCase:
    def __init__(self, *, expenses: ExpenseRepository) -> None:
        self._expenses = expenses

    def execute(self, user_id: str, query: ExpenseQuery) -> Sequence[Expense]:
        items = self._expenses.list_for_user(user_id, query)
        logger.debug(f"expenses.list: user_id={user_id} n={len(items)}")
        return items


class CreateExpenseUseCase:
    def __init__(self, *, expenses: ExpenseRepository) -> None:
        self._expenses = expenses

    def execute(self, user_id: str, draft: ExpenseDraft) -> Expense:
        expense = self._expenses.add(user_id, draft)
        logger.info(f"expenses.create: ok user_id={user_id} expense_id={expense.id}")
        return expense


class UpdateExpenseUseCase:
    def __init__(self, *, expenses: ExpenseRepository) -> None:
        self._expenses = expenses

    def execute(self, user_id: str, expense_id: str, draft: ExpenseDraft) -> Expense:
        expense = self._expenses.update(user_id, expense_id, draft)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        logger.info(f"expenses.update: ok user_id={user_id} expense_id={expense_id}")
        return expense


class DeleteExpenseUseCase:
    def __init__(self, *, expenses: ExpenseRepository) -> None:
        self._expenses = expenses

    def execute(self, user_id: str, expense_id: str) -> None:
        if not self._expenses.delete(user_id, expense_id):
            raise ExpenseNotFoundError(expense_id)
        logger.info(f"expenses.delete: ok user_id={user_id} expense_id={expense_id}")
