"""In-process users store. Used by tests and STORE_BACKEND=memory."""

from __future__ import annotations

from collections import defaultdict
from typing import Any
from uuid import uuid4

from roster.errors import NotFoundError, RemoteOperationError
from roster.models.user import UserRecord
from roster.repos.base import UserStore


class MemoryUserStore(UserStore):
    """
    Dict-backed store that keeps insertion order.

    fail_next() makes the next N calls of an operation raise
    RemoteOperationError, the way a flaky network would.
    """

    def __init__(self, records: list[UserRecord] | None = None) -> None:
        self.docs: dict[str, dict[str, Any]] = {}
        self.calls: dict[str, int] = defaultdict(int)
        self._failures: dict[str, int] = defaultdict(int)
        for record in records or []:
            self.docs[record.id] = record.fields()

    def fail_next(self, operation: str, times: int = 1) -> None:
        self._failures[operation] += times

    def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        if self._failures[operation] > 0:
            self._failures[operation] -= 1
            raise RemoteOperationError(operation, "simulated failure")

    async def list(self) -> list[UserRecord]:
        self._enter("list")
        return [UserRecord(id=doc_id, **data) for doc_id, data in self.docs.items()]

    async def get(self, user_id: str) -> UserRecord | None:
        self._enter("get")
        data = self.docs.get(user_id)
        return UserRecord(id=user_id, **data) if data is not None else None

    async def add(self, fields: dict[str, Any]) -> str:
        self._enter("add")
        user_id = uuid4().hex
        self.docs[user_id] = dict(fields)
        return user_id

    async def update(self, user_id: str, fields: dict[str, Any]) -> None:
        self._enter("update")
        if user_id not in self.docs:
            raise NotFoundError(user_id)
        self.docs[user_id] = dict(fields)

    async def delete(self, user_id: str) -> None:
        self._enter("delete")
        self.docs.pop(user_id, None)
