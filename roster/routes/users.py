"""User API routes — list, create, get, edit, delete."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from roster.dependencies import get_cache, get_store
from roster.kernel.salary import Decrement, Increment, SalaryAction, Set
from roster.models.user import EDITABLE_FIELDS, EditUserRequest, SalaryAdjustment, UserListResponse, UserRecord
from roster.repos.base import UserStore
from roster.services.detail_view import NOT_FOUND_MESSAGE, DetailController, DetailState
from roster.services.list_view import ListStatus, ListViewController
from roster.services.query_cache import QueryCache

router = APIRouter(prefix="/api/users", tags=["users"])


def _to_action(adjustment: SalaryAdjustment) -> SalaryAction:
    if adjustment.type == "increment":
        return Increment(adjustment.amount)
    if adjustment.type == "decrement":
        return Decrement(adjustment.amount)
    return Set(adjustment.value)


async def _load_detail(detail: DetailController) -> None:
    """Load a user or raise the matching HTTP error."""
    await detail.load()
    if detail.state is DetailState.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    if detail.state is DetailState.ERROR:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail.error)


@router.get("", status_code=200)
async def list_users(
    search: str = "",
    role: str = "",
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> UserListResponse:
    """List users matching the search text and role filter."""
    view = ListViewController(store, cache)
    view.set_search(search)
    view.set_role(role)
    await view.load()
    if view.status is ListStatus.ERROR:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=view.error)
    return UserListResponse(users=view.visible, total=len(view.users), search=view.search, role=view.role)


@router.post("", status_code=201)
async def create_user(
    values: dict[str, Any] = Body(...),
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> UserRecord:
    """
    Create a user.

    Validation failures return 422 with one message per field and never
    reach the store.
    """
    view = ListViewController(store, cache)
    user = await view.add(values)
    if view.form_errors:
        raise HTTPException(status_code=422, detail={"errors": view.form_errors})
    if user is None:
        notes = view.drain_notifications()
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=notes[-1].description)
    return user


@router.get("/{user_id}", status_code=200)
async def get_user(
    user_id: str,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> UserRecord:
    """Get a single user by id."""
    async with DetailController(store, user_id, cache) as detail:
        await _load_detail(detail)
        return detail.record


@router.put("/{user_id}", status_code=200)
async def edit_user(
    user_id: str,
    req: EditUserRequest,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> UserRecord:
    """
    Run one edit session: apply field edits and salary adjustments in order,
    then save everything as one wholesale update.
    """
    async with DetailController(store, user_id, cache) as detail:
        await _load_detail(detail)
        detail.start_edit()
        for name in EDITABLE_FIELDS:
            value = getattr(req, name)
            if value is not None:
                detail.set_field(name, value)
        for adjustment in req.adjustments:
            detail.dispatch(_to_action(adjustment))

        if not await detail.save():
            if detail.save_error == NOT_FOUND_MESSAGE:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail.save_error)
        return detail.record


@router.delete("/{user_id}", status_code=200)
async def delete_user(
    user_id: str,
    store: UserStore = Depends(get_store),
    cache: QueryCache = Depends(get_cache),
) -> dict[str, str]:
    """Permanently delete a user."""
    view = ListViewController(store, cache)
    if not await view.delete(user_id):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to delete user")
    return {"message": "Deleted User successfully"}
