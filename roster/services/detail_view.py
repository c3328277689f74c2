"""
Detail/edit controller for a single user.

States:
    loading → not_found | error | viewing
    viewing ⇄ editing      (start_edit / cancel)
    editing → viewing      (successful save only)
    editing → editing      (failed save, save_error set)

The salary is tracked separately from the field draft and only changes
through the kernel's salary reducer. Save merges both into one wholesale
update.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from roster.errors import NotFoundError, RemoteOperationError
from roster.kernel.salary import Decrement, Increment, SalaryAction, SalaryState, Set, apply, parse_amount
from roster.models.notification import SAVE_FAILED, Notification
from roster.models.user import EDITABLE_FIELDS, UserRecord
from roster.repos.base import UserStore
from roster.services.query_cache import USERS_KEY, QueryCache

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "User not found."
LOAD_FAILED_MESSAGE = "Failed to load user. Please try again later."


class DetailState(str, Enum):
    LOADING = "loading"
    NOT_FOUND = "not_found"
    ERROR = "error"
    VIEWING = "viewing"
    EDITING = "editing"


class DetailController:
    """
    One mounted detail view.

    close() tears the view down: an in-flight fetch is cancelled and any
    result that still arrives is dropped. Usable as an async context manager.
    """

    def __init__(self, store: UserStore, user_id: str, cache: QueryCache | None = None) -> None:
        self._store = store
        self._cache = cache
        self.user_id = user_id
        self.state = DetailState.LOADING
        self.record: UserRecord | None = None
        self.draft: dict[str, str] = {}
        self.salary = SalaryState()
        self.amount_input: Any = ""
        self.error: str | None = None
        self.save_error: str | None = None
        self.notifications: list[Notification] = []
        self._task: asyncio.Task | None = None
        self._disposed = False

    async def __aenter__(self) -> DetailController:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -- loading --

    async def load(self) -> DetailState:
        """Fetch the record. Ends in viewing, not_found or error."""
        self.state = DetailState.LOADING
        self.error = None
        self._task = asyncio.create_task(self._store.get(self.user_id))
        try:
            record = await self._task
        except asyncio.CancelledError:
            if self._disposed:
                return self.state
            raise
        except RemoteOperationError as e:
            if self._disposed:
                return self.state
            logger.warning("detail_view: failed to load user %s: %s", self.user_id, e)
            self.state = DetailState.ERROR
            self.error = LOAD_FAILED_MESSAGE
            return self.state
        finally:
            self._task = None

        if self._disposed:
            return self.state
        if record is None:
            self.state = DetailState.NOT_FOUND
            self.error = NOT_FOUND_MESSAGE
            return self.state

        self._seed(record)
        self.state = DetailState.VIEWING
        return self.state

    def close(self) -> None:
        self._disposed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _seed(self, record: UserRecord) -> None:
        """Reset draft and salary to a persisted record."""
        self.record = record
        self.draft = {
            "first_name": record.first_name,
            "last_name": record.last_name,
            "email": record.email,
            "avatar": record.avatar,
        }
        self.salary = apply(SalaryState(), Set(record.salary))
        self.amount_input = ""

    def _require(self, *states: DetailState) -> None:
        if self.state not in states:
            raise RuntimeError(f"Not allowed while {self.state.value}")

    # -- edit mode --

    def start_edit(self) -> None:
        self._require(DetailState.VIEWING)
        self.save_error = None
        self.state = DetailState.EDITING

    def set_field(self, name: str, value: str) -> None:
        """Edit one draft field. The avatar is carried through, not edited."""
        self._require(DetailState.EDITING)
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"{name} is not editable")
        self.draft[name] = value

    def set_amount(self, raw: Any) -> None:
        self.amount_input = raw

    @property
    def amount(self) -> int | float | None:
        return parse_amount(self.amount_input)

    @property
    def can_adjust(self) -> bool:
        """Increment/decrement are disabled unless the amount is a positive number."""
        return self.amount is not None

    def dispatch(self, action: SalaryAction) -> SalaryState:
        self._require(DetailState.EDITING)
        self.salary = apply(self.salary, action)
        return self.salary

    def increment(self) -> bool:
        if not self.can_adjust:
            return False
        self.dispatch(Increment(self.amount))
        return True

    def decrement(self) -> bool:
        if not self.can_adjust:
            return False
        self.dispatch(Decrement(self.amount))
        return True

    def cancel(self) -> None:
        """Discard the draft and the salary adjustment, back to view mode."""
        self._require(DetailState.EDITING)
        self._seed(self.record)
        self.save_error = None
        self.state = DetailState.VIEWING

    async def save(self) -> bool:
        """
        Write draft fields and the adjusted salary as one wholesale update.

        Only a successful write replaces the held record and leaves edit mode.
        The list cache is invalidated so the list view shows the new values.

        Returns:
            True on success; False with save_error set otherwise
        """
        self._require(DetailState.EDITING)
        updated = UserRecord(
            id=self.user_id,
            first_name=self.draft["first_name"],
            last_name=self.draft["last_name"],
            email=self.draft["email"],
            avatar=self.draft["avatar"],
            role=self.record.role,
            salary=self.salary.salary,
        )
        try:
            await self._store.update(self.user_id, updated.fields())
        except NotFoundError:
            logger.warning("detail_view: user %s vanished before save", self.user_id)
            self.save_error = NOT_FOUND_MESSAGE
            self.notifications.append(SAVE_FAILED)
            return False
        except RemoteOperationError as e:
            logger.warning("detail_view: failed to save user %s: %s", self.user_id, e)
            self.save_error = SAVE_FAILED.description
            self.notifications.append(SAVE_FAILED)
            return False

        logger.info("detail_view: saved user %s", self.user_id)
        if self._cache is not None:
            self._cache.invalidate(USERS_KEY)
        self._seed(updated)
        self.save_error = None
        self.state = DetailState.VIEWING
        return True
