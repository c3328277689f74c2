"""
Roster Kernel — Renderer

Pure functions: view data → HTML string
No IO. Deterministic: same input → same output, always.

Pages are Mustache templates rendered with chevron. Every {{value}} is
HTML-escaped by chevron; nothing here uses triple mustaches.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import chevron

from roster.kernel.format import format_salary
from roster.models.notification import Notification
from roster.models.user import ROLES, UserRecord

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_HEAD = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{page_title}}</title>
<style>
body { font-family: system-ui, sans-serif; margin: 0; padding: 20px; color: #1a202c; }
h1 { color: #553c9a; }
.toolbar { display: flex; gap: 1%; margin-bottom: 32px; }
.toolbar input[type=text] { flex: 1; }
.grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(280px, 1fr)); gap: 24px; }
.card { position: relative; background: #e9d8fd; padding: 24px; border-radius: 8px; text-align: center; }
.card a { color: inherit; text-decoration: none; }
.card img, .detail img { border-radius: 50%; width: 100px; height: 100px; }
.card .delete { position: absolute; top: 8px; right: 12px; opacity: 0; }
.card:hover .delete { opacity: 1; }
.name { font-weight: bold; font-size: 1.8em; }
.email { color: #718096; }
.field-error, .error { color: #e53e3e; }
.toast { position: fixed; bottom: 16px; right: 16px; padding: 12px 16px; border-radius: 6px; color: #fff; }
.toast-success { background: #38a169; } .toast-error { background: #e53e3e; }
.toast-warning { background: #dd6b20; } .toast-info { background: #3182ce; }
.detail { max-width: 28rem; margin: 40px auto; padding: 32px; box-shadow: 0 4px 12px rgba(0,0,0,.15); }
</style>
</head>
<body>
{{#notifications}}
<div class="toast toast-{{status}}" role="status" data-duration="{{duration_ms}}">
<strong>{{title}}</strong> {{description}}
</div>
{{/notifications}}
"""

_LIST = """{{>head}}
<main>
<h1>{{heading}}</h1>
{{#error}}
<p class="error">{{error}}</p>
{{/error}}
{{^error}}
<form class="toolbar" method="get" action="/">
<input type="text" name="search" placeholder="Search members" value="{{search}}">
<select name="role" aria-label="Filter">
<option value="">{{#role}}Clear Filter{{/role}}{{^role}}Filter{{/role}}</option>
{{#roles}}
<option value="{{name}}"{{#selected}} selected{{/selected}}>{{name}}</option>
{{/roles}}
</select>
<button type="submit">{{filter_label}}</button>
<a class="button" href="/?add=1">Add User</a>
</form>
<div class="grid">
{{#users}}
<div class="card">
<form class="delete" method="post" action="/user/{{id}}/delete">
<button type="submit" aria-label="delete">Delete</button>
</form>
<a href="/user/{{id}}">
<img src="{{avatar}}" alt="User Avatar">
<p class="name">{{first_name}} {{last_name}}</p>
<p class="email">{{email}}</p>
<p class="role">{{role}}</p>
</a>
</div>
{{/users}}
</div>
{{#form_open}}
<dialog open>
<h2>Add New User</h2>
<form method="post" action="/users">
{{#fields}}
<label for="{{name}}">{{name}}</label>
<input id="{{name}}" name="{{name}}" placeholder="{{name}}" value="{{value}}">
{{#message}}<p class="field-error">{{message}}</p>{{/message}}
{{/fields}}
<label for="role">Role</label>
<select id="role" name="role">
<option value="">Select Role</option>
{{#form_roles}}
<option value="{{name}}"{{#selected}} selected{{/selected}}>{{name}}</option>
{{/form_roles}}
</select>
{{#role_message}}<p class="field-error">{{role_message}}</p>{{/role_message}}
<button type="submit">Add</button>
<a href="/">Cancel</a>
</form>
</dialog>
{{/form_open}}
{{/error}}
</main>
</body>
</html>
"""

_DETAIL = """{{>head}}
<main class="detail">
{{#viewing}}
<a class="button" href="/user/{{id}}/edit" aria-label="edit">Edit</a>
{{#avatar}}<img src="{{avatar}}" alt="User Avatar">{{/avatar}}
<h2>{{first_name}} {{last_name}}</h2>
<p class="email">{{email}}</p>
<p>Salary: {{salary_display}}</p>
<a class="button" href="/">Back to Home</a>
{{/viewing}}
{{#editing}}
<form method="post" action="/user/{{id}}/edit">
<label for="first_name">First Name</label>
<input id="first_name" name="first_name" value="{{draft_first_name}}">
<label for="last_name">Last Name</label>
<input id="last_name" name="last_name" value="{{draft_last_name}}">
<label for="email">Email</label>
<input id="email" name="email" type="email" value="{{draft_email}}">
<input type="hidden" name="salary" value="{{salary}}">
<label for="amount">Salary: {{salary_display}}</label>
<input id="amount" name="amount" type="number" min="0" placeholder="Amount" value="{{amount}}">
<button type="submit" name="action" value="increment">+{{currency}}{{amount}}</button>
<button type="submit" name="action" value="decrement">-{{currency}}{{amount}}</button>
{{#hint}}<p class="field-error">{{hint}}</p>{{/hint}}
{{#save_error}}<p class="error">{{save_error}}</p>{{/save_error}}
<button type="submit" name="action" value="cancel">Cancel</button>
<button type="submit" name="action" value="save">Save Changes</button>
</form>
{{/editing}}
</main>
</body>
</html>
"""

_MESSAGE = """{{>head}}
<main class="detail">
<p class="error">{{message}}</p>
<a class="button" href="/">Go Back</a>
</main>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_list_page(
    *,
    heading: str,
    users: Iterable[UserRecord],
    search: str = "",
    role: str = "",
    filter_label: str = "Filter",
    form_open: bool = False,
    form_values: Mapping[str, Any] | None = None,
    form_errors: Mapping[str, str] | None = None,
    notifications: Iterable[Notification] = (),
    error: str | None = None,
) -> str:
    """Render the members list with its toolbar, cards and creation form."""
    form_values = form_values or {}
    form_errors = form_errors or {}
    selected_form_role = str(form_values.get("role") or "")
    context = {
        "page_title": heading,
        "heading": heading,
        "error": error or "",
        "search": search,
        "role": role,
        "filter_label": filter_label,
        "roles": [{"name": r, "selected": r == role} for r in ROLES],
        "users": [u.model_dump() for u in users],
        "form_open": form_open,
        "fields": [
            {
                "name": name,
                "value": "" if form_values.get(name) is None else str(form_values.get(name)),
                "message": form_errors.get(name, ""),
            }
            for name in ("first_name", "last_name", "email", "avatar", "salary")
        ],
        "form_roles": [{"name": r, "selected": r == selected_form_role} for r in ROLES],
        "role_message": form_errors.get("role", ""),
        "notifications": _notifications(notifications),
    }
    return _render(_LIST, context)


def render_detail_page(
    *,
    record: UserRecord,
    editing: bool = False,
    draft: Mapping[str, str] | None = None,
    salary: int | float | None = None,
    amount: Any = "",
    hint: str | None = None,
    save_error: str | None = None,
    notifications: Iterable[Notification] = (),
) -> str:
    """Render one user in view mode, or the edit form when editing."""
    draft = draft or {}
    salary = record.salary if salary is None else salary
    context = {
        "page_title": record.full_name,
        "id": record.id,
        "viewing": not editing,
        "editing": editing,
        "avatar": record.avatar,
        "first_name": record.first_name,
        "last_name": record.last_name,
        "email": record.email,
        "draft_first_name": draft.get("first_name", record.first_name),
        "draft_last_name": draft.get("last_name", record.last_name),
        "draft_email": draft.get("email", record.email),
        "salary": salary,
        "salary_display": format_salary(salary),
        "currency": "₹",
        "amount": "" if amount is None else amount,
        "hint": hint or "",
        "save_error": save_error or "",
        "notifications": _notifications(notifications),
    }
    return _render(_DETAIL, context)


def render_message_page(message: str, page_title: str = "Roster") -> str:
    """Terminal page (not found, load failure) with a way back to the list."""
    return _render(_MESSAGE, {"page_title": page_title, "message": message, "notifications": []})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _notifications(notifications: Iterable[Notification]) -> list[dict[str, Any]]:
    return [n.model_dump() for n in notifications]


def _render(template: str, context: dict[str, Any]) -> str:
    return chevron.render(template, context, partials_dict={"head": _HEAD})
