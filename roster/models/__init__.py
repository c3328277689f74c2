"""
Pydantic models for roster.

All data shapes defined here. No imports from repos, services, or routes.
"""

from roster.models.notification import Notification
from roster.models.user import (
    ROLES,
    EditUserRequest,
    NewUser,
    SalaryAdjustment,
    UserListResponse,
    UserRecord,
    validate_new_user,
)

__all__ = [
    "ROLES",
    # User models
    "UserRecord",
    "NewUser",
    "validate_new_user",
    "EditUserRequest",
    "SalaryAdjustment",
    "UserListResponse",
    # Notifications
    "Notification",
]
