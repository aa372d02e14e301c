# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.expenses import (
    CreateExpenseUseCase,
    DeleteExpenseUseCase,
    ListExpensesUseCase,
    UpdateExpenseUseCase,
)
from .use_cases.preferences import GetPreferencesUseCase, UpdatePreferencesUseCase
from .use_cases.users.current_user import GetCurrentUserUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "CreateExpenseUseCase",
    "DeleteExpenseUseCase",
    "GetCurrentUserUseCase",
    "GetPreferencesUseCase",
    "ListExpensesUseCase",
    "LoginUserUseCase",
    "RegisterUserUseCase",
    "UpdateExpenseUseCase",
    "UpdatePreferencesUseCase",
]
