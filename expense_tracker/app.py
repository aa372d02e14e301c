# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import importlib
from typing import Any, Protocol, cast

from flask import Flask

from expense_tracker.container import Container
from expense_tracker.infrastructure.observability import configure_metrics
from expense_tracker.shared.config import AppConfig, load_config
from expense_tracker.shared.logging import logger, setup_logging
from expense_tracker.shared.middleware.error_handler import configure_error_handling
from expense_tracker.shared.middleware.rate_limit import configure_rate_limiting
from expense_tracker.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def _configure_security_headers(app: Flask, *, enable_hsts: bool) -> None:
    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )
        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )
        return resp


def create_app(
    config: AppConfig | None = None, container: Container | None = None
) -> Flask:
    config = config or load_config()
    container = container or Container(config)

    level = "DEBUG" if config.debug_logging else config.log_level
    setup_logging(level, log_file=config.log_file)

    app = Flask(__name__)
    app.extensions["container"] = container

    # Request logging goes first so the correlation id is bound for later hooks
    configure_request_logging(
        app,
        debug_mode=config.debug_logging,
        trust_forwarded_for=config.security.trust_forwarded_for,
    )
    configure_metrics(app, enabled=config.observability.metrics_enabled)
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_rate_limiting(
        app,
        container.rate_limiter,
        enabled=config.security.enable_rate_limit,
        trust_forwarded_for=config.security.trust_forwarded_for,
    )

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)
    _configure_security_headers(app, enable_hsts=config.security.enable_hsts)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.expenses_controller.as_blueprint())
    app.register_blueprint(container.preferences_controller.as_blueprint())

    container.database.init_schema_with_retry()
    atexit.register(container.close)

    logger.info(f"Flask app initialized (env={config.app_env})")
    return app


def main() -> None:
    config = load_config()
    app = create_app(config)
    app.run(host=config.host, port=config.port, debug=config.debug_logging)


if __name__ == "__main__":
    main()
