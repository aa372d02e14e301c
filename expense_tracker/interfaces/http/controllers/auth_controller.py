# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from expense_tracker.application.use_cases.users.current_user import GetCurrentUserUseCase
from expense_tracker.application.use_cases.users.login_user import LoginUserUseCase
from expense_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from expense_tracker.domain.users.entities import NewUser
from expense_tracker.domain.users.exceptions import InvalidCredentialsError
from expense_tracker.infrastructure.auth import AuthGuard, current_user_id
from expense_tracker.infrastructure.observability import AUTH_FAILURES
from expense_tracker.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    SessionDTO,
    UserDTO,
)
from expense_tracker.shared.config import SecurityConfig
from expense_tracker.shared.errors.validation import raise_validation_error
from expense_tracker.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
        guard: AuthGuard,
        security: SecurityConfig,
        token_ttl_seconds: int,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._current_user_use_case = current_user_use_case
        self._guard = guard
        self._security = security
        self._token_ttl_seconds = token_ttl_seconds

    def _auth_response(self, payload: AuthSuccessDTO, status: int) -> tuple[Response, int]:
        response = jsonify(payload.model_dump(mode="json", by_alias=True))
        if self._security.auth_cookie_enabled:
            response.set_cookie(
                self._security.auth_cookie_name,
                payload.token,
                httponly=True,
                samesite=self._security.cookie_samesite,
                secure=self._security.cookie_secure,
                max_age=self._token_ttl_seconds,
            )
        return response, status

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, token = self._register_use_case.execute(
            NewUser(
                username=dto.username,
                email=dto.email,
                password=dto.password,
                display_name=dto.display_name or "",
            )
        )
        logger.info(f"auth.register: issued token user_id={user.id}")
        return self._auth_response(
            AuthSuccessDTO(user=UserDTO.from_user(user), token=token), 201
        )

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user, token = self._login_use_case.execute(dto.identifier, dto.password)
        except InvalidCredentialsError:
            AUTH_FAILURES.labels(kind="invalid_credentials").inc()
            logger.warning(f"auth.login: failed from {request.remote_addr}")
            raise

        return self._auth_response(
            AuthSuccessDTO(user=UserDTO.from_user(user), token=token), 200
        )

    def logout(self) -> tuple[Response, int]:
        # Tokens are stateless; logging out only drops the browser cookie
        response = jsonify({"ok": True})
        if self._security.auth_cookie_enabled:
            response.delete_cookie(
                self._security.auth_cookie_name,
                samesite=self._security.cookie_samesite,
                secure=self._security.cookie_secure,
                httponly=True,
            )
        logger.info("auth.logout: ok")
        return response, 200

    def me(self) -> Response:
        user = self._current_user_use_case.execute(current_user_id())
        return jsonify({"user": UserDTO.from_user(user).model_dump(mode="json", by_alias=True)})

    def session(self) -> Response:
        user_id = g.get("user_id")
        if not user_id:
            return jsonify(SessionDTO(authenticated=False).model_dump(mode="json"))
        user = self._current_user_use_case.execute(user_id)
        payload = SessionDTO(authenticated=True, user=UserDTO.from_user(user))
        return jsonify(payload.model_dump(mode="json", by_alias=True))

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/auth/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/auth/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/auth/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule(
            "/auth/me", view_func=self._guard.required(self.me), methods=["GET"]
        )
        bp.add_url_rule(
            "/session", view_func=self._guard.optional(self.session), methods=["GET"]
        )
        return bp
