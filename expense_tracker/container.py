"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from expense_tracker.application.services.password_hashing import WerkzeugPasswordHasher
from expense_tracker.application.services.tokens import JwtTokenService
from expense_tracker.application.use_cases.expenses import (
    CreateExpenseUseCase,
    DeleteExpenseUseCase,
    ListExpensesUseCase,
    UpdateExpenseUseCase,
)
from expense_tracker.application.use_cases.preferences import (
    GetPreferencesUseCase,
    UpdatePreferencesUseCase,
)
from expense_tracker.application.use_cases.users.current_user import GetCurrentUserUseCase
from expense_tracker.application.use_cases.users.login_user import LoginUserUseCase
from expense_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from expense_tracker.infrastructure.auth import AuthGuard
from expense_tracker.infrastructure.db import Database
from expense_tracker.infrastructure.repositories.expenses.sqlalchemy_expense_repository import (
    SqlAlchemyExpenseRepository,
)
from expense_tracker.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyPreferencesRepository,
    SqlAlchemyUserRepository,
)
from expense_tracker.interfaces.http.controllers.auth_controller import AuthController
from expense_tracker.interfaces.http.controllers.expenses_controller import ExpensesController
from expense_tracker.interfaces.http.controllers.misc_controller import MiscController
from expense_tracker.interfaces.http.controllers.preferences_controller import (
    PreferencesController,
)
from expense_tracker.shared.config import AppConfig
from expense_tracker.shared.logging import logger
from expense_tracker.shared.middleware.rate_limit import (
    API_BUCKET,
    AUTH_BUCKET,
    FixedWindowRateLimiter,
    RateLimiter,
)


class Container:
    """Owns every process-scoped object; built once per app and closed on exit."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._closed = False

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            self.config.jwt_secret, ttl_seconds=self.config.token_ttl_seconds
        )

    @cached_property
    def rate_limiter(self) -> RateLimiter:
        security = self.config.security
        return RateLimiter(
            {
                AUTH_BUCKET: FixedWindowRateLimiter(
                    security.auth_rate_limit_requests,
                    security.auth_rate_limit_window,
                    max_keys=security.rate_limit_max_keys,
                ),
                API_BUCKET: FixedWindowRateLimiter(
                    security.api_rate_limit_requests,
                    security.api_rate_limit_window,
                    max_keys=security.rate_limit_max_keys,
                ),
            }
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database.session_factory)

    @cached_property
    def preferences_repository(self) -> SqlAlchemyPreferencesRepository:
        return SqlAlchemyPreferencesRepository(self.database.session_factory)

    @cached_property
    def expense_repository(self) -> SqlAlchemyExpenseRepository:
        return SqlAlchemyExpenseRepository(self.database.session_factory)

    @cached_property
    def auth_guard(self) -> AuthGuard:
        security = self.config.security
        return AuthGuard(
            tokens=self.token_service,
            users=self.user_repository,
            cookie_name=security.auth_cookie_name if security.auth_cookie_enabled else None,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            current_user_use_case=self.current_user_use_case,
            guard=self.auth_guard,
            security=self.config.security,
            token_ttl_seconds=self.config.token_ttl_seconds,
        )

    @cached_property
    def expenses_controller(self) -> ExpensesController:
        return ExpensesController(
            list_use_case=ListExpensesUseCase(expenses=self.expense_repository),
            create_use_case=CreateExpenseUseCase(expenses=self.expense_repository),
            update_use_case=UpdateExpenseUseCase(expenses=self.expense_repository),
            delete_use_case=DeleteExpenseUseCase(expenses=self.expense_repository),
            guard=self.auth_guard,
        )

    @cached_property
    def preferences_controller(self) -> PreferencesController:
        return PreferencesController(
            get_use_case=GetPreferencesUseCase(preferences=self.preferences_repository),
            update_use_case=UpdatePreferencesUseCase(preferences=self.preferences_repository),
            guard=self.auth_guard,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if "rate_limiter" in self.__dict__:
            self.rate_limiter.reset()
        if "database" in self.__dict__:
            self.database.dispose()
        logger.info("container: closed")
