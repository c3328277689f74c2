"""
Error taxonomy for roster.

Controllers turn these into view states and notifications.
Routes turn them into HTTP status codes.
"""

from __future__ import annotations


class RosterError(Exception):
    """Base class for all roster errors."""

    pass


class ValidationError(RosterError):
    """A new-user draft failed validation. Never reaches the store."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))


class NotFoundError(RosterError):
    """Requested user id does not exist in the store."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class RemoteOperationError(RosterError):
    """A store call failed: network, permission, timeout or unexpected status."""

    def __init__(self, operation: str, message: str = "", status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        detail = f"{operation} failed"
        if status_code is not None:
            detail += f" ({status_code})"
        if message:
            detail += f": {message}"
        super().__init__(detail)
