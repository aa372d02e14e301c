# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import Expense, ExpenseDraft, ExpenseQuery


class ExpenseRepository(Protocol):
    def list_for_user(self, user_id: str, query: ExpenseQuery) -> Sequence[Expense]: ...
    def add(self, user_id: str, draft: ExpenseDraft) -> Expense: ...
    def update(self, user_id: str, expense_id: str, draft: ExpenseDraft) -> Expense | None: ...
    def delete(self, user_id: str, expense_id: str) -> bool: ...
