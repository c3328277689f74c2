"""Server-rendered pages — / (list) and /user/{id} (detail), plus their form posts."""

from __future__ import annotations

import math

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from roster import config
from roster.dependencies import get_cache, get_store
from roster.kernel.renderer import render_detail_page, render_list_page, render_message_page
from roster.kernel.salary import Set
from roster.models.user import EDITABLE_FIELDS
from roster.repos.base import UserStore
from roster.services.detail_view import DetailController, DetailState
from roster.services.list_view import ListViewController
from roster.services.query_cache import QueryCache

router = APIRouter(tags=["pages"])

_AMOUNT_HINT = "Enter a positive amount."

_EDIT_ACTIONS = ("increment", "decrement", "cancel", "save")


def _list_response(view: ListViewController, status_code: int = 200) -> HTMLResponse:
    html = render_list_page(
        heading=config.settings.APP_TITLE,
        users=view.visible,
        search=view.search,
        role=view.role,
        filter_label=view.filter_label,
        form_open=view.form_open,
        form_values=view.form_values,
        form_errors=view.form_errors,
        notifications=view.drain_notifications(),
        error=view.error,
    )
    return HTMLResponse(content=html, status_code=status_code)


def _terminal_response(detail: DetailController) -> HTMLResponse:
    status_code = 404 if detail.state is DetailState.NOT_FOUND else 502
    return HTMLResponse(content=render_message_page(detail.error or ""), status_code=status_code)


def _edit_response(detail: DetailController, hint: str | None = None) -> HTMLResponse:
    html = render_detail_page(
        record=detail.record,
        editing=True,
        draft=detail.draft,
        salary=detail.salary.salary,
        amount=detail.amount_input,
        hint=hint,
        save_error=detail.save_error,
        notifications=detail.notifications,
    )
    return HTMLResponse(content=html)


@router.get("/", response_class=HTMLResponse)
async def list_page(
    search: str = "",
    role: str = "",
    add: bool = False,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> Response:
    """Members list. ?add=1 opens the creation form."""
    view = ListViewController(store, cache)
    view.set_search(search)
    view.set_role(role)
    if add:
        view.open_form()
    await view.load()
    status_code = 200 if view.error is None else 502
    return _list_response(view, status_code)


@router.post("/users", response_class=HTMLResponse)
async def create_user_form(
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    avatar: str = Form(""),
    role: str = Form(""),
    salary: str = Form(""),
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> Response:
    """Creation form submit. Invalid input re-renders the open form with errors."""
    view = ListViewController(store, cache)
    await view.load()
    await view.add(
        {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "avatar": avatar,
            "role": role,
            "salary": salary,
        }
    )
    return _list_response(view)


@router.post("/user/{user_id}/delete", response_class=HTMLResponse)
async def delete_user_form(
    user_id: str,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> Response:
    view = ListViewController(store, cache)
    if not await view.delete(user_id):
        await view.load()
    return _list_response(view)


@router.get("/user/{user_id}", response_class=HTMLResponse)
async def detail_page(
    user_id: str,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> Response:
    async with DetailController(store, user_id, cache) as detail:
        await detail.load()
    if detail.state is not DetailState.VIEWING:
        return _terminal_response(detail)
    return HTMLResponse(content=render_detail_page(record=detail.record))


@router.get("/user/{user_id}/edit", response_class=HTMLResponse)
async def edit_page(
    user_id: str,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> Response:
    async with DetailController(store, user_id, cache) as detail:
        await detail.load()
        if detail.state is not DetailState.VIEWING:
            return _terminal_response(detail)
        detail.start_edit()
        return _edit_response(detail)


@router.post("/user/{user_id}/edit", response_class=HTMLResponse)
async def edit_form(
    user_id: str,
    action: str = Form("save"),
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    salary: str = Form(""),
    amount: str = Form(""),
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> Response:
    """
    One step of an edit session.

    The draft and the adjusted salary travel in the form, so each post
    rebuilds the session from the persisted record plus the submitted draft.
    """
    if action not in _EDIT_ACTIONS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown action: {action}")

    async with DetailController(store, user_id, cache) as detail:
        await detail.load()
        if detail.state is not DetailState.VIEWING:
            return _terminal_response(detail)

        if action == "cancel":
            return RedirectResponse(url=f"/user/{user_id}", status_code=303)

        detail.start_edit()
        submitted = {"first_name": first_name, "last_name": last_name, "email": email}
        for name in EDITABLE_FIELDS:
            detail.set_field(name, submitted[name])
        carried = _parse_salary(salary)
        if carried is not None:
            detail.dispatch(Set(carried))
        detail.set_amount(amount)

        if action in ("increment", "decrement"):
            adjusted = detail.increment() if action == "increment" else detail.decrement()
            return _edit_response(detail, hint=None if adjusted else _AMOUNT_HINT)

        if await detail.save():
            return RedirectResponse(url=f"/user/{user_id}", status_code=303)
        return _edit_response(detail)


def _parse_salary(raw: str) -> int | float | None:
    """The carried salary: any finite number ≥ 0."""
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return int(value) if value.is_integer() else value
