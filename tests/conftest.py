"""Pytest configuration and fixtures."""

from datetime import timedelta
from itertools import count

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from tests.helpers import (
    ADMIN_KEY,
    BASE_TIME,
    SPATIALITE_LIBRARY_PATH,
    TEST_DATABASE_URL,
    open_store,
    property_row,
    reset_tables,
    spatialite_loads,
)


@pytest.fixture(scope="session")
def database_url() -> str:
    """PostGIS when configured, else in-memory SQLite with SpatiaLite."""
    if TEST_DATABASE_URL:
        return TEST_DATABASE_URL
    if spatialite_loads():
        return "sqlite://"
    pytest.skip("needs TEST_DATABASE_URL (PostGIS) or the SpatiaLite module")


@pytest.fixture
def shared_database_url(database_url, tmp_path) -> str:
    """A database several connections can share (file-backed for SQLite)."""
    if database_url.startswith("sqlite"):
        return f"sqlite:///{tmp_path / 'shared.db'}"
    open_store(database_url).close()
    return database_url


@pytest.fixture
def store(database_url):
    """Fresh record store for each test."""
    store = open_store(database_url)
    yield store
    store.close()


@pytest.fixture
def db(store):
    with store.session() as session:
        yield session


def _property_factory(session_provider):
    # created_at increases one minute per property so ordering is deterministic
    ticks = count()

    def make(**overrides):
        overrides.setdefault("created_at", BASE_TIME + timedelta(minutes=next(ticks)))
        with session_provider() as session:
            prop = property_row(**overrides)
            session.add(prop)
            session.commit()
            session.refresh(prop)
            session.expunge(prop)
            return prop

    return make


@pytest.fixture
def make_property(store):
    """Factory that persists a property and returns the detached row."""
    return _property_factory(store.session)


@pytest.fixture
def test_settings(database_url) -> Settings:
    return Settings(
        DATABASE_URL=database_url,
        SPATIALITE_LIBRARY_PATH=SPATIALITE_LIBRARY_PATH,
        ADMIN_API_KEY=ADMIN_KEY,
        LOG_LEVEL="WARNING",
        API_PREFIX="/api",
    )


@pytest.fixture
def client(test_settings):
    """TestClient with the lifespan running (store opened and closed)."""
    app = create_app(test_settings)
    with TestClient(app) as client:
        store = client.app.state.store
        if store.engine.dialect.name != "sqlite":
            reset_tables(store)
        yield client


@pytest.fixture
def api_property(client):
    """Persist properties into the store used by `client`."""
    return _property_factory(client.app.state.store.session)


@pytest.fixture
def admin_headers() -> dict:
    return {"X-Admin-Key": ADMIN_KEY}
