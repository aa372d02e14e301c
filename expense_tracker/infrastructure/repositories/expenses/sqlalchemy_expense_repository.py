# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from expense_tracker.domain.expenses.entities import Expense as DomainExpense
from expense_tracker.domain.expenses.entities import ExpenseDraft, ExpenseQuery
from expense_tracker.domain.expenses.repositories import ExpenseRepository
from expense_tracker.infrastructure.db.models import Expense
from expense_tracker.infrastructure.unit_of_work import unit_of_work_scope


def _to_domain(row: Expense) -> DomainExpense:
    return DomainExpense(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        amount=row.amount,
        category=row.category,
        date=row.date,
        description=row.description or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlAlchemyExpenseRepository(ExpenseRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_for_user(self, user_id: str, query: ExpenseQuery) -> Sequence[DomainExpense]:
        with unit_of_work_scope(self._session_factory) as session:
            q = session.query(Expense).filter(Expense.user_id == user_id)
            if query.search:
                pattern = f"%{_escape_like(query.search)}%"
                q = q.filter(
                    or_(
                        Expense.title.ilike(pattern, escape="\\"),
                        Expense.description.ilike(pattern, escape="\\"),
                        Expense.category.ilike(pattern, escape="\\"),
                    )
                )
            month = query.month_range()
            if month is not None:
                start, end = month
                q = q.filter(Expense.date >= start, Expense.date < end)
            if query.category:
                q = q.filter(Expense.category == query.category)
            rows = q.order_by(Expense.date.desc(), Expense.created_at.desc()).all()
            return [_to_domain(row) for row in rows]

    def add(self, user_id: str, draft: ExpenseDraft) -> DomainExpense:
        with unit_of_work_scope(self._session_factory) as session:
            row = Expense(
                id=str(uuid.uuid4()),
                user_id=user_id,
                title=draft.title,
                amount=draft.amount,
                category=draft.category,
                date=draft.date,
                description=draft.description,
            )
            session.add(row)
            session.flush()
            return _to_domain(row)

    def update(
        self, user_id: str, expense_id: str, draft: ExpenseDraft
    ) -> DomainExpense | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(Expense)
                .filter(Expense.id == expense_id, Expense.user_id == user_id)
                .first()
            )
            if row is None:
                return None
            row.title = draft.title
            row.amount = draft.amount
            row.category = draft.category
            row.date = draft.date
            row.description = draft.description
            session.flush()
            return _to_domain(row)

    def delete(self, user_id: str, expense_id: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            deleted = (
                session.query(Expense)
                .filter(Expense.id == expense_id, Expense.user_id == user_id)
                .delete()
            )
            return bool(deleted)
