"""
List view controller.

Holds the fetched users list, the search and role filters, the creation
form, and the add/delete mutations with their cache invalidation.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from roster.errors import RemoteOperationError, ValidationError
from roster.kernel.filters import NO_FILTER, filter_users
from roster.models.notification import ADD_FAILED, DELETE_FAILED, USER_ADDED, USER_DELETED, Notification
from roster.models.user import UserRecord, validate_new_user
from roster.repos.base import UserStore
from roster.services.query_cache import USERS_KEY, QueryCache

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load users. Please try again later."

FORM_FIELDS: tuple[str, ...] = ("first_name", "last_name", "email", "avatar", "salary", "role")


class ListStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


def empty_form() -> dict[str, str]:
    return {name: "" for name in FORM_FIELDS}


class ListViewController:
    """One mounted list view. Cheap to create; shared state lives in the cache."""

    def __init__(self, store: UserStore, cache: QueryCache) -> None:
        self._store = store
        self._cache = cache
        self.status = ListStatus.LOADING
        self.users: list[UserRecord] = []
        self.error: str | None = None
        self.search = ""
        self.role = NO_FILTER
        self.form_open = False
        self.form_values: dict[str, Any] = empty_form()
        self.form_errors: dict[str, str] = {}
        self.notifications: list[Notification] = []

    # -- data --

    async def load(self) -> None:
        """Fetch the users list through the cache. Failure is terminal for this view."""
        self.status = ListStatus.LOADING
        try:
            self.users = await self._cache.fetch(USERS_KEY, self._store.list)
        except RemoteOperationError as e:
            logger.warning("list_view: failed to load users: %s", e)
            self.status = ListStatus.ERROR
            self.error = LOAD_FAILED_MESSAGE
            return
        self.status = ListStatus.READY
        self.error = None

    # -- filters --

    def set_search(self, text: str) -> None:
        self.search = text or ""

    def set_role(self, role: str) -> None:
        self.role = role or NO_FILTER

    def clear_role(self) -> None:
        self.role = NO_FILTER

    @property
    def visible(self) -> list[UserRecord]:
        """Users passing both filters. Derived on every access."""
        return filter_users(self.users, self.search, self.role)

    @property
    def filter_label(self) -> str:
        return self.role or "Filter"

    # -- creation form --

    def open_form(self) -> None:
        self.form_open = True

    def close_form(self) -> None:
        self.form_open = False

    async def add(self, values: dict[str, Any]) -> UserRecord | None:
        """
        Submit the creation form.

        Invalid drafts never reach the store: errors go to form_errors and
        the form keeps its values. A store failure emits an error
        notification and also keeps the form open and filled.

        Returns:
            The created UserRecord, or None if nothing was created
        """
        self.form_open = True
        self.form_values = {**empty_form(), **{k: v for k, v in values.items() if k in FORM_FIELDS}}
        try:
            new_user = validate_new_user(values)
        except ValidationError as e:
            self.form_errors = e.errors
            return None
        self.form_errors = {}

        fields = new_user.to_fields()
        try:
            user_id = await self._store.add(fields)
        except RemoteOperationError as e:
            logger.warning("list_view: add failed: %s", e)
            self.notifications.append(ADD_FAILED)
            return None

        logger.info("list_view: added user %s", user_id)
        self._cache.invalidate(USERS_KEY)
        self.notifications.append(USER_ADDED)
        self.form_open = False
        self.form_values = empty_form()
        await self.load()
        return UserRecord(id=user_id, **fields)

    async def delete(self, user_id: str) -> bool:
        """
        Delete one user. Never navigates to the detail view.

        Returns:
            True if the store confirmed the delete
        """
        try:
            await self._store.delete(user_id)
        except RemoteOperationError as e:
            logger.warning("list_view: delete %s failed: %s", user_id, e)
            self.notifications.append(DELETE_FAILED)
            return False

        logger.info("list_view: deleted user %s", user_id)
        self._cache.invalidate(USERS_KEY)
        self.notifications.append(USER_DELETED)
        await self.load()
        return True

    def drain_notifications(self) -> list[Notification]:
        notes, self.notifications = self.notifications, []
        return notes
