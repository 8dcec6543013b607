"""Application factory wiring Flask extensions, the auth service and blueprints."""

from __future__ import annotations

from flask import Flask

from authcore.core.config import BaseConfig, get_config
from authcore.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :raises ConfigurationError: If the JWT signing secrets are missing or,
        in production, too weak. The app never starts half-configured.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Secrets first: a bad signing setup is fatal before anything connects
    from authcore.core.secrets import load_auth_settings

    settings = load_auth_settings(app.config)

    from authcore.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from authcore.services.auth import build_auth_service

    build_auth_service(app, settings)

    from authcore.api import init_app as init_api

    init_api(app)

    from authcore.core import errors

    errors.init_app(app)

    from authcore import cli as app_cli

    app_cli.init_app(app)

    return app
