"""
Roster FastAPI application.

Entry point for the server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from roster import config
from roster.repos import create_store
from roster.routes import pages as pages_routes
from roster.routes import users as user_routes
from roster.services.query_cache import QueryCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Create the users store and the query cache, owned by the app
    - Close the store's network client on shutdown
    """
    # Startup
    app.state.store = create_store()
    app.state.cache = QueryCache()
    logger.info("Store initialized (backend=%s)", config.settings.STORE_BACKEND)

    yield

    # Shutdown
    await app.state.store.close()
    logger.info("Store closed")


app = FastAPI(
    title="Roster",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(user_routes.router)
app.include_router(pages_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
