"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Upper bound for the outbound identity lookup, in seconds.
MAX_USERS_API_TIMEOUT: Final[float] = 30.0


# Load .env during development (no-op when the file is absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_timeout(name: str, default: float = MAX_USERS_API_TIMEOUT) -> float:
    """Read a positive timeout in seconds, clamped to the 30 second ceiling.

    Unparseable or non-positive values fall back to ``default``.
    """
    raw = os.getenv(name)
    try:
        value = float(raw) if raw is not None else default
    except ValueError:
        value = default
    if value <= 0:
        value = default
    return min(value, MAX_USERS_API_TIMEOUT)


def build_database_url(environ: Mapping[str, str] | None = None) -> str:
    """Return the SQLAlchemy URL for the posts database.

    ``DATABASE_URL`` wins when set. Otherwise the URL is composed from the
    discrete ``DATABASE_HOST``/``DATABASE_PORT``/``DATABASE_USERNAME``/
    ``DATABASE_PASSWORD``/``DATABASE_NAME``/``DATABASE_SSLMODE`` variables
    (PostgreSQL through psycopg). When neither is available a local SQLite
    file is used.

    :param environ: Mapping to read from; defaults to :data:`os.environ`.
    :type environ: Mapping[str, str] | None
    :returns: Database connection string.
    :rtype: str
    """
    env = os.environ if environ is None else environ
    url = env.get("DATABASE_URL")
    if url:
        return url

    host = env.get("DATABASE_HOST")
    name = env.get("DATABASE_NAME")
    if not host or not name:
        return "sqlite:///./posts.db"

    user = quote_plus(env.get("DATABASE_USERNAME", ""))
    password = quote_plus(env.get("DATABASE_PASSWORD", ""))
    port = env.get("DATABASE_PORT", "5432")
    credentials = f"{user}:{password}@" if user else ""
    url = f"postgresql+psycopg://{credentials}{host}:{port}/{name}"
    sslmode = env.get("DATABASE_SSLMODE")
    if sslmode:
        url = f"{url}?sslmode={sslmode}"
    return url


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    APP_VERSION: str
        Version string reported by the root banner and health endpoints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_TRACK_MODIFICATIONS: bool
        Disabled to avoid extra overhead from the event system.
    SQLALCHEMY_ECHO: bool
        When ``True`` SQLAlchemy logs SQL statements for debugging.
    USERS_API_URL: str
        Base URL of the external Users API that answers ``/auth/me``.
    USERS_API_TIMEOUT: float
        Timeout for identity lookups; never above 30 seconds.
    DEFAULT_PAGE_SIZE: int
        Page size used when ``page_size`` is absent or invalid.
    MAX_PAGE_SIZE: int
        Largest accepted ``page_size``.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS (``*`` for any).
    CORS_MAX_AGE: int
        Preflight cache lifetime in seconds.
    PORT: int
        Port the WSGI server binds to.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # DB
    SQLALCHEMY_DATABASE_URI = build_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Users API
    USERS_API_URL = os.getenv("USERS_API_URL", "http://localhost:8081")
    USERS_API_TIMEOUT = env_timeout("USERS_API_TIMEOUT")

    # Pagination
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    CORS_MAX_AGE = 86400

    PORT = int(os.getenv("PORT", "8080"))

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Points the Users API at a placeholder host; tests mock it.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    USERS_API_URL = "http://users-api.test"
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
