"""
Shared pytest fixtures.

Every test gets its own in-memory SQLite database (StaticPool keeps the
single connection alive across sessions), so no state leaks between tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import emotherm.models  # noqa: F401
from emotherm.core.config import Settings, get_settings
from emotherm.db.base import Base, get_db
from emotherm.main import app
from emotherm.services.store import AssessmentStore


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def settings():
    return Settings(_env_file=None)


@pytest.fixture()
def store(db, settings):
    return AssessmentStore.from_session(db, settings)


@pytest.fixture()
def make_store(db):
    """Store with settings overrides, e.g. make_store(STORAGE_SOFT_LIMIT=500)."""
    def _make(**overrides):
        return AssessmentStore.from_session(db, Settings(_env_file=None, **overrides))
    return _make


@pytest.fixture()
def client(session_factory, settings):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
