"""
Roster Kernel — the pure core.

Four components:
  salary   — (state, action) → state for the salary adjustment control
  filters  — search/role predicate over the users list
  format   — salary display formatting
  renderer — view data → HTML pages

No IO. The services layer wires these to the store and the cache.
"""

from roster.kernel.filters import NO_FILTER, filter_users, matches
from roster.kernel.format import format_salary
from roster.kernel.renderer import render_detail_page, render_list_page, render_message_page
from roster.kernel.salary import Decrement, Increment, SalaryState, Set, apply, parse_amount, replay

__all__ = [
    "SalaryState",
    "Increment",
    "Decrement",
    "Set",
    "apply",
    "replay",
    "parse_amount",
    "NO_FILTER",
    "matches",
    "filter_users",
    "format_salary",
    "render_list_page",
    "render_detail_page",
    "render_message_page",
]
