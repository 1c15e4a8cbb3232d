"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from posts_api.core.config import BaseConfig, get_config
from posts_api.core.logger import configure_logging, init_app as init_logging
from posts_api.services._shared.ports import IdentityResolver


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    identity_resolver: IdentityResolver | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class, object or import path; ``APP_ENV`` decides
        when omitted.
    :param identity_resolver: Resolver to install instead of the Users API
        client (tests, local stubs).
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from posts_api.core import extensions

    if identity_resolver is not None:
        app.extensions[extensions.IDENTITY_RESOLVER_KEY] = identity_resolver

    extensions.init_app(app)

    init_logging(app)

    from posts_api.core import cors

    cors.init_app(app)

    from posts_api.api import init_app as init_api

    init_api(app)

    from posts_api.core import errors

    errors.init_app(app)

    from posts_api import cli as app_cli

    app_cli.init_app(app)

    return app
