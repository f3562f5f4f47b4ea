from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import List
import os

load_dotenv()

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wealthmap.db")
    # SQLite stores load SpatiaLite from here; PostgreSQL needs PostGIS instead
    SPATIALITE_LIBRARY_PATH: str = os.getenv("SPATIALITE_LIBRARY_PATH", "mod_spatialite")

    # Admin access (X-Admin-Key header); empty disables admin endpoints
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # App
    APP_NAME: str = os.getenv("APP_NAME", "WealthMap Property Directory API")
    DEBUG: bool = os.getenv("DEBUG", "False") == "True"
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # Pagination
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "12"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "standard")

settings = Settings()
