"""Tests for settings, logging setup and the error taxonomy."""

import inspect
import json
import logging
import sys

import pytest
from fastapi.routing import APIRoute

from app.api.errors import status_for
from app.core.config import Settings
from app.core.exceptions import (
    ConflictError,
    DirectoryError,
    InvalidIdentifierError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.core.logging import JsonFormatter, get_logger, setup_logging
from app.main import create_app


class TestSettings:
    """Tests for Settings."""

    def test_default_pagination(self) -> None:
        settings = Settings()
        assert settings.DEFAULT_PAGE_SIZE == 12
        assert settings.MAX_PAGE_SIZE == 100
        assert settings.SPATIALITE_LIBRARY_PATH

    def test_explicit_values(self) -> None:
        settings = Settings(DATABASE_URL="sqlite://", ADMIN_API_KEY="k", API_PREFIX="/v2", MAX_PAGE_SIZE=50)
        assert settings.DATABASE_URL == "sqlite://"
        assert settings.ADMIN_API_KEY == "k"
        assert settings.API_PREFIX == "/v2"
        assert settings.MAX_PAGE_SIZE == 50

    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv("MAX_PAGE_SIZE", "25")
        monkeypatch.setenv("LOG_FORMAT", "json")
        settings = Settings()
        assert settings.MAX_PAGE_SIZE == 25
        assert settings.LOG_FORMAT == "json"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_levels(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

        setup_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("app").level == logging.WARNING

    def test_invalid_level_defaults_to_info(self) -> None:
        setup_logging(level="INVALID")
        assert logging.getLogger().level == logging.INFO

    def test_replaces_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_format(self) -> None:
        setup_logging(format_type="json")
        [handler] = logging.getLogger().handlers
        assert isinstance(handler.formatter, JsonFormatter)

    def test_sql_echo_is_quiet(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_get_logger(self) -> None:
        assert get_logger("app.services.bookmark_guard").name == "app.services.bookmark_guard"


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        defaults = dict(
            name="app.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Deleted property %s",
            args=("abc",),
            exc_info=None,
        )
        defaults.update(kwargs)
        return logging.LogRecord(**defaults)

    def test_format_basic(self) -> None:
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "app.test"
        assert data["message"] == "Deleted property abc"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("disk full")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info)))
        assert "ValueError: disk full" in data["exception"]

    def test_format_with_extra(self) -> None:
        record = self._record()
        record.extra = {"request_id": "r-1"}
        data = json.loads(JsonFormatter().format(record))
        assert data["request_id"] == "r-1"


class TestErrorTaxonomy:
    def test_hierarchy(self) -> None:
        for error_type in (ValidationError, NotFoundError, ConflictError, StorageError):
            assert issubclass(error_type, DirectoryError)
        assert issubclass(InvalidIdentifierError, StorageError)

    def test_message(self) -> None:
        error = NotFoundError("Property not found")
        assert error.message == "Property not found"
        assert str(error) == "Property not found"

    @pytest.mark.parametrize(
        "error,code",
        [
            (ValidationError("bad"), 400),
            (ConflictError("dup"), 400),
            (InvalidIdentifierError("bad id"), 400),
            (NotFoundError("missing"), 404),
            (StorageError("boom"), 500),
            (DirectoryError("unknown"), 500),
        ],
    )
    def test_http_status(self, error, code) -> None:
        assert status_for(error) == code


class TestRoutes:
    def test_api_handlers_are_plain_functions(self) -> None:
        # Blocking Session calls must stay on FastAPI's threadpool
        app = create_app(Settings(ADMIN_API_KEY="k", LOG_LEVEL="WARNING"))
        handlers = [r for r in app.routes if isinstance(r, APIRoute) and r.path.startswith("/api")]

        assert len(handlers) > 10
        for route in handlers:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path
