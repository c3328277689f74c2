"""
Roster Kernel — List Filters

Pure predicates over the fetched users list. Recomputed on every input
change; nothing is cached here.
"""

from __future__ import annotations

from collections.abc import Iterable

from roster.models.user import UserRecord

# Role filter value that matches every role.
NO_FILTER = ""


def matches(user: UserRecord, search: str = "", role: str = NO_FILTER) -> bool:
    """
    True when the user passes both filters.

    search: case-insensitive substring of "first last" or of the email.
    role: exact match, or NO_FILTER for any role.
    """
    needle = search.lower()
    matches_search = needle in user.full_name.lower() or needle in user.email.lower()
    matches_role = user.role == role if role else True
    return matches_search and matches_role


def filter_users(users: Iterable[UserRecord], search: str = "", role: str = NO_FILTER) -> list[UserRecord]:
    """Users passing both filters, in input order."""
    return [u for u in users if matches(u, search, role)]
