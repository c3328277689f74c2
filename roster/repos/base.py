"""
Store protocol for the users collection.

Implement with the hosted document database for production, or in-memory for tests.
"""

from __future__ import annotations

from typing import Any

from roster.models.user import UserRecord


class UserStore:
    """
    Abstract store interface.

    Every method raises RemoteOperationError on network, permission or
    timeout failures.
    """

    async def list(self) -> list[UserRecord]:
        """All records, in store order."""
        raise NotImplementedError

    async def get(self, user_id: str) -> UserRecord | None:
        """Fetch one record. Returns None if it does not exist."""
        raise NotImplementedError

    async def add(self, fields: dict[str, Any]) -> str:
        """Create a record and return the id the store assigned."""
        raise NotImplementedError

    async def update(self, user_id: str, fields: dict[str, Any]) -> None:
        """Replace a record's field set wholesale. Raises NotFoundError if absent."""
        raise NotImplementedError

    async def delete(self, user_id: str) -> None:
        """Permanently remove a record."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources."""
        return None
