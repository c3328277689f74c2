"""Transient notifications (toasts) emitted by controllers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class Notification(BaseModel):
    """A toast shown after a mutation succeeds or fails."""

    title: str
    description: str
    status: Literal["success", "error", "warning", "info"] = "info"
    duration_ms: int = 4000
    position: str = "bottom-right"
    closable: bool = True


USER_ADDED = Notification(
    title="User added.",
    description="The new user has been added successfully!",
    status="success",
)
ADD_FAILED = Notification(title="Error", description="Failed to add user", status="error")
USER_DELETED = Notification(title="Deleted", description="Deleted User successfully", status="warning")
DELETE_FAILED = Notification(title="Error", description="Failed to delete user", status="error")
SAVE_FAILED = Notification(title="Error", description="Failed to update user", status="error")
