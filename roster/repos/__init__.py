"""
Store layer for roster.

All remote database access lives here and ONLY here.
"""

from roster import config
from roster.repos.base import UserStore
from roster.repos.firestore import FirestoreUserStore
from roster.repos.memory import MemoryUserStore


def create_store() -> UserStore:
    """Build the store selected by STORE_BACKEND."""
    if config.settings.STORE_BACKEND == "memory":
        return MemoryUserStore()
    return FirestoreUserStore()


__all__ = [
    "UserStore",
    "FirestoreUserStore",
    "MemoryUserStore",
    "create_store",
]
