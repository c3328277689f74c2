"""
Shared route dependencies.

The store and the query cache are created once by the app lifespan and
kept on app.state. Routes receive them explicitly through these.
"""

from __future__ import annotations

from fastapi import Request

from roster.repos.base import UserStore
from roster.services.query_cache import QueryCache


def get_store(request: Request) -> UserStore:
    return request.app.state.store


def get_cache(request: Request) -> QueryCache:
    return request.app.state.cache
