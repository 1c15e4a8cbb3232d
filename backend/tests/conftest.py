"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. The Users API is
replaced by a :class:`StubIdentityResolver` that tests populate per case.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from posts_api.core.config import TestingConfig
from posts_api.core.extensions import IDENTITY_RESOLVER_KEY
from posts_api.core.extensions import db as _db  # Flask-SQLAlchemy instance
from posts_api.factory import create_app  # application factory under test
from posts_api.services._shared.ports import StubIdentityResolver
from posts_api.services.identity import ResolvedIdentity
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

ALICE = ResolvedIdentity(id=42, name="Alice", email="a@x.com", role="user")
BOB = ResolvedIdentity(id=7, name="Bob", email="bob@x.com", role="user")


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied, a stub
        identity resolver installed and logging noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, identity_resolver=StubIdentityResolver())
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by nested transactions in each test.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. ``db.session`` is swapped for
    the scoped session so stores built by the API layer share it.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def identity(app):
    """Install a fresh :class:`StubIdentityResolver` knowing Alice and Bob.

    Tokens ``"alice-token"`` and ``"bob-token"`` resolve to :data:`ALICE` and
    :data:`BOB`; any other token is rejected as invalid.
    """
    stub = StubIdentityResolver({"alice-token": ALICE, "bob-token": BOB})
    previous = app.extensions.get(IDENTITY_RESOLVER_KEY)
    app.extensions[IDENTITY_RESOLVER_KEY] = stub
    try:
        yield stub
    finally:
        app.extensions[IDENTITY_RESOLVER_KEY] = previous


@pytest.fixture()
def client(app, session, identity):
    """Flask test client running against the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-01-01"):
    ...         ...
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the transactional session fixture.

    Pure unit tests that never touch the database do not request ``session``;
    the wiring only happens for tests that do.
    """
    from tests.factories import SQLAlchemySession

    if "session" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    else:
        SQLAlchemySession.set(None)
    yield
