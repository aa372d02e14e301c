from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from expense_tracker.app import create_app
from expense_tracker.container import Container
from expense_tracker.shared.config import AppConfig, DatabaseConfig, SecurityConfig


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        app_env="test",
        jwt_secret="test-secret-with-enough-entropy-0123456789",
        log_level="WARNING",
        database=DatabaseConfig(
            url=f"sqlite:///{tmp_path / 'expenses.db'}",
            init_retries=1,
            init_retry_delay=0,
        ),
        security=SecurityConfig(allowed_origins=["http://localhost:3000"]),
    )


@pytest.fixture()
def container(app_config: AppConfig) -> Iterator[Container]:
    container = Container(app_config)
    yield container
    container.close()


@pytest.fixture()
def app(app_config: AppConfig, container: Container) -> Flask:
    return create_app(app_config, container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def register_user(client: FlaskClient) -> Callable[..., dict]:
    def _register(
        username: str = "alice",
        password: str = "secret123",
        *,
        remote_addr: str = "10.0.0.1",
    ) -> dict:
        response = client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
            environ_overrides={"REMOTE_ADDR": remote_addr},
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _register


@pytest.fixture()
def auth_headers(register_user: Callable[..., dict]) -> dict[str, str]:
    token = register_user()["token"]
    return {"Authorization": f"Bearer {token}"}
