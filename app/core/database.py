"""
The record store handle: one SQLAlchemy engine plus its session factory.

The store is opened once at process start (application lifespan), handed to
request handlers through `app.state`, and disposed at shutdown. Nothing else
in the app holds a module-level engine.
"""

import os
from contextlib import contextmanager
from typing import Generator, Optional

from fastapi import Request
from geoalchemy2 import load_spatialite
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.logging import get_logger
from app.models.base import Base
from app.models.bookmark import Bookmark  # noqa: F401  registers the table
from app.models.company import Company, Employee  # noqa: F401
from app.models.feedback import Feedback  # noqa: F401
from app.models.property import Property  # noqa: F401

logger = get_logger(__name__)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_sqlite_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _on_sqlite_connect(dbapi_connection, connection_record):
    # Geometry columns and ST_* functions come from SpatiaLite; only the
    # WGS84 reference systems are loaded since 4326 is the only SRID in use
    load_spatialite(dbapi_connection, transaction=True, init_mode="WGS84")
    # FK enforcement backs the bookmark cascade; off by default in SQLite
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class RecordStore:
    """
    Durable storage for the directory records.

    PostgreSQL needs the PostGIS extension; SQLite needs the SpatiaLite module
    at `spatialite_path` (a file path or a name the loader can resolve).
    """

    def __init__(self, database_url: str, echo: bool = False, spatialite_path: str = "mod_spatialite"):
        self.database_url = database_url
        self.echo = echo
        self.spatialite_path = spatialite_path
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self, create_tables: bool = True) -> "RecordStore":
        if self.is_open:
            return self

        kwargs = {"echo": self.echo, "pool_pre_ping": True}
        if _is_sqlite(self.database_url):
            kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
            if _is_sqlite_memory(self.database_url):
                # One shared connection, otherwise every session sees an empty db
                kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.database_url, **kwargs)
        if _is_sqlite(self.database_url):
            # geoalchemy2 loads the module named by this variable
            os.environ["SPATIALITE_LIBRARY_PATH"] = self.spatialite_path
            event.listen(self.engine, "connect", _on_sqlite_connect)

        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

        if create_tables:
            Base.metadata.create_all(bind=self.engine)

        logger.info("Record store opened (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Record store closed")
        self.engine = None
        self._session_factory = None

    def new_session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Record store is not open")
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        db = self.new_session()
        try:
            yield db
        finally:
            db.close()


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_db(request: Request) -> Generator[Session, None, None]:
    db = get_store(request).new_session()
    try:
        yield db
    finally:
        db.close()
