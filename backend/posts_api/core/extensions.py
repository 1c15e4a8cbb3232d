"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

IDENTITY_RESOLVER_KEY = "identity_resolver"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the identity resolver.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`posts_api.models` package so SQLAlchemy metadata is ready for
        migrations.

    Notes
    -----
    A resolver already present in ``app.extensions`` (e.g. a test stub) is
    left untouched.
    """
    db.init_app(app)

    from posts_api import models as _models  # noqa: F401

    migrate.init_app(app, db)

    if IDENTITY_RESOLVER_KEY not in app.extensions:
        from posts_api.infra.users_api.identity_resolver import UsersApiIdentityResolver

        app.extensions[IDENTITY_RESOLVER_KEY] = UsersApiIdentityResolver(
            base_url=app.config["USERS_API_URL"],
            timeout=app.config["USERS_API_TIMEOUT"],
        )
