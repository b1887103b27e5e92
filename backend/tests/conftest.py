"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction on a single in-memory SQLite
connection. The session joins it through SAVEPOINTs, so service-level
commits and rollbacks behave normally while nothing leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from excursion_api.core.config import TestingConfig
from excursion_api.core.extensions import db as _db  # Flask-SQLAlchemy instance
from excursion_api.factory import create_app  # application factory under test
from excursion_api.infra.jwt.pyjwt_token_signer import JwtSettings, JwtTokenSigner
from excursion_api.services.auth import AuthService, AuthTokenConfig

TEST_JWT_KEY = "test-signing-key-0123456789-abcdefghijklmnopqrstuvwxyz"


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Pins JWT settings so tokens are reproducible across runs.
    - ``pysqlite`` is switched to manual transaction control so SAVEPOINTs
      nest inside the per-test transaction.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"isolation_level": None}}
    JWT_SECURITY_KEY = TEST_JWT_KEY
    JWT_SECRET_KEY = TEST_JWT_KEY
    JWT_VALID_ISSUER = "excursion-api-tests"
    JWT_VALID_AUDIENCE = "excursion-frontend-tests"
    JWT_DECODE_ISSUER = JWT_VALID_ISSUER
    JWT_DECODE_AUDIENCE = JWT_VALID_AUDIENCE
    JWT_EXPIRY_IN_MINUTES = 15
    CORS_ORIGINS = "http://localhost:4200"
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
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
        # With isolation_level=None pysqlite never emits BEGIN on its own
        event.listen(_db.engine, "begin", lambda conn: conn.exec_driver_sql("BEGIN"))
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session joined to a per-test outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; every ``commit()``
        releases a SAVEPOINT and the outer transaction is rolled back after
        the test.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
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
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def client(app, session):
    return app.test_client()


@pytest.fixture()
def signer(app) -> JwtTokenSigner:
    return JwtTokenSigner(JwtSettings.from_config(app.config))


@pytest.fixture()
def auth_service(app, session, signer) -> AuthService:
    return AuthService(signer=signer, token_cfg=AuthTokenConfig.from_config(app.config))


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
