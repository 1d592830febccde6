# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import os

from flask import Flask
from flask_cors import CORS

from bizcard.infrastructure.container import Container
from bizcard.infrastructure.db import init_db
from bizcard.shared.config import AppConfig, load_config
from bizcard.shared.logging import logger, setup_logging
from bizcard.shared.middleware.error_handler import configure_error_handling
from bizcard.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_config()
    setup_logging(config.log_level, debug_mode=config.debug_logging)

    container = Container(config)
    init_db(container.engine)

    app = Flask(__name__)
    app.extensions["bizcard.container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    CORS(app, origins=config.security.allowed_origins)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.protected_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp

    logger.info(f"Flask app initialized (env={config.app_env})")
    return app


def main() -> None:
    port = int(os.environ.get("PORT", "5001"))
    create_app().run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
