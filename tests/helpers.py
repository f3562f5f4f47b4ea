"""Shared test data builders and backend settings."""

import os
import sqlite3
from datetime import datetime, timezone

from app.core.database import RecordStore
from app.models.base import Base
from app.models.property import OwnerSex, Property

ADMIN_KEY = "test-admin-key"
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

# Spatial backends: a PostGIS database when TEST_DATABASE_URL is set,
# otherwise SQLite with the SpatiaLite module.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "")
SPATIALITE_LIBRARY_PATH = os.getenv("SPATIALITE_LIBRARY_PATH", "mod_spatialite")


def spatialite_loads(path: str = SPATIALITE_LIBRARY_PATH) -> bool:
    conn = sqlite3.connect(":memory:")
    try:
        conn.enable_load_extension(True)
        conn.load_extension(path)
    except (AttributeError, sqlite3.Error):
        # AttributeError: interpreter built without extension loading
        return False
    finally:
        conn.close()
    return True


def open_store(url: str) -> RecordStore:
    """Open a store with empty tables, whatever an earlier run left behind."""
    store = RecordStore(url, spatialite_path=SPATIALITE_LIBRARY_PATH).open()
    if store.engine.dialect.name != "sqlite":
        reset_tables(store)
    return store


def reset_tables(store: RecordStore) -> None:
    Base.metadata.drop_all(bind=store.engine)
    Base.metadata.create_all(bind=store.engine)


def property_row(**overrides) -> Property:
    """A valid Property row; keyword arguments override column values."""
    data = {
        "name": "Sunset Villa",
        "street": "1 Market St",
        "city": "San Francisco",
        "state": "CA",
        "zip_code": "94103",
        "longitude": -122.42,
        "latitude": 37.77,
        "owner_name": "Jane Doe",
        "owner_age": 42,
        "owner_sex": OwnerSex.FEMALE,
        "owner_email": "jane.doe@example.com",
        "owner_mobile_number": "+14155550100",
        "owner_occupation": "Engineer",
        "monthly_income": 8000.0,
        "total_wealth": 750000.0,
    }
    data.update(overrides)
    return Property(**data)
