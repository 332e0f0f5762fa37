"""Pytest fixtures configuring the app, signing keys and an isolated database.

Each test gets freshly created tables in an in-memory SQLite database (one
shared connection through Flask-SQLAlchemy's static pool). Units of work
commit for real, so tables are dropped afterwards instead of rolled back.
"""

from __future__ import annotations

import os

import pytest

from socialapp.core.config import TestingConfig
from socialapp.core.extensions import db as _db  # Flask-SQLAlchemy instance
from socialapp.core.keys import SigningKeyPair
from socialapp.factory import create_app  # application factory under test


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Keys are injected by the ``key_pair`` fixture, never read from env.
    - Refresh tokens use the relational backend; Redis tests use fakeredis.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_PRIVATE_KEY = None
    JWT_PUBLIC_KEY = None
    JWT_ISSUER = "self"
    REFRESH_TOKEN_BACKEND = "sql"
    REFRESH_TOKEN_TTL_MS = 7 * 24 * 60 * 60 * 1000
    ACCESS_TOKEN_TTL_MINUTES = 15
    REFRESH_COOKIE_SECURE = True
    REFRESH_COOKIE_SAMESITE = "Strict"
    RATELIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def key_pair() -> SigningKeyPair:
    """Throwaway 2048-bit RSA pair shared by the whole session."""
    return SigningKeyPair.generate()


@pytest.fixture(scope="session")
def app(key_pair):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, key_pair=key_pair)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def db(app):
    """Create tables for one test and drop them afterwards.

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


@pytest.fixture()
def session(db):
    """Flask-scoped session used by repositories and units of work."""
    yield db.session


@pytest.fixture()
def client(app, db):
    """Test client sharing the app context (and database) of ``db``."""
    return app.test_client()


@pytest.fixture()
def auth_components(app, db):
    """Collaborators the factory stored under ``app.extensions['auth']``."""
    return app.extensions["auth"]


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the per-test session ------------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when a test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" in request.fixturenames or "session" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    else:
        SQLAlchemySession.set(None)
    yield
