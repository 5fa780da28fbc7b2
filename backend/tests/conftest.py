"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a transaction against an in-memory SQLite database; the
session under test works in SAVEPOINTs nested in it, so service-level commits
and rollbacks behave normally while nothing leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from liftlog.core.extensions import db as _db  # Flask-SQLAlchemy instance
from liftlog.factory import create_app  # application factory under test
from sqlalchemy.orm import scoped_session, sessionmaker


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Pins the calendar zone and copy suffix so assertions are stable.
    """

    TESTING = True
    DEBUG = False
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = "WARNING"
    DEFAULT_TIMEZONE = "UTC"
    WORKOUT_COPY_SUFFIX = " (Copy)"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    return create_app(TestConfig, instance_relative_config=False)


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Parameters
    ----------
    app: flask.Flask
        Application fixture ensuring the Flask context is available.

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
    """Keep a dedicated connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by the per-test transactions.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in an outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; everything it commits
        is discarded when the test ends.

    Notes
    -----
    The session joins the connection with ``create_savepoint``: each of its
    transactions is a SAVEPOINT inside the test transaction, so ``commit()``
    releases and ``rollback()`` rewinds only that SAVEPOINT.
    """
    top_trans = connection.begin()
    nested = connection.begin_nested()

    SessionFactory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
    )
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        if nested.is_active:
            nested.rollback()
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _app_context(app, db):
    """Push a fresh app context per test so ``flask.g`` does not leak between cases."""
    with app.app_context():
        yield


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
