from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime, timezone
from app.api.errors import register_error_handlers
from app.core.config import Settings, settings as default_settings
from app.core.database import RecordStore
from app.core.logging import get_logger, setup_logging
from app.routers import bookmarks, company, employees, feedback, properties

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Store handle lives for the whole process; handlers get it via app.state
        store = RecordStore(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            spatialite_path=settings.SPATIALITE_LIBRARY_PATH,
        ).open()
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Property directory with geo search, user bookmarks and company administration",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Admin-Key"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    register_error_handlers(app)

    # Include routers
    app.include_router(properties.router, prefix=settings.API_PREFIX)
    app.include_router(bookmarks.router, prefix=settings.API_PREFIX)
    app.include_router(company.router, prefix=settings.API_PREFIX)
    app.include_router(employees.router, prefix=settings.API_PREFIX)
    app.include_router(feedback.router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        return {
            "message": "WealthMap Property Directory API",
            "version": "1.0.0",
            "status": "active",
            "documentation": "/docs"
        }

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "timestamp": datetime.now(timezone.utc)
        }

    return app


app = create_app()
