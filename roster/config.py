"""
Roster configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Store
    STORE_BACKEND: str = os.environ.get("STORE_BACKEND", "firestore")
    FIRESTORE_PROJECT_ID: str = os.environ.get("FIRESTORE_PROJECT_ID", "")
    FIRESTORE_API_KEY: str = os.environ.get("FIRESTORE_API_KEY", "")
    FIRESTORE_DATABASE: str = os.environ.get("FIRESTORE_DATABASE", "(default)")
    FIRESTORE_BASE_URL: str = os.environ.get("FIRESTORE_BASE_URL", "https://firestore.googleapis.com/v1")
    USERS_COLLECTION: str = os.environ.get("USERS_COLLECTION", "users")
    STORE_TIMEOUT_SECONDS: float = float(os.environ.get("STORE_TIMEOUT_SECONDS", "10"))

    # Query cache
    USERS_CACHE_TTL_SECONDS: float = float(os.environ.get("USERS_CACHE_TTL_SECONDS", "30"))
    QUERY_RETRIES: int = int(os.environ.get("QUERY_RETRIES", "3"))
    QUERY_RETRY_BASE_SECONDS: float = float(os.environ.get("QUERY_RETRY_BASE_SECONDS", "1.0"))

    # Application
    APP_TITLE: str = os.environ.get("APP_TITLE", "Kula India office Members")
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")


# Singleton instance
settings = Settings()

# Validate required settings (skip in test mode)
_testing = os.environ.get("TESTING", "").lower() == "true"

if settings.STORE_BACKEND not in ("firestore", "memory"):
    raise RuntimeError(f"STORE_BACKEND must be 'firestore' or 'memory', got {settings.STORE_BACKEND!r}")

if not _testing and settings.STORE_BACKEND == "firestore":
    if not settings.FIRESTORE_PROJECT_ID:
        raise RuntimeError("FIRESTORE_PROJECT_ID environment variable is required")
    if not settings.FIRESTORE_API_KEY:
        raise RuntimeError("FIRESTORE_API_KEY environment variable is required")
