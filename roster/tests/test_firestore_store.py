"""Tests for FirestoreUserStore against a mocked REST surface."""

from __future__ import annotations

import json

import httpx
import pytest

from roster.errors import NotFoundError, RemoteOperationError
from roster.repos.firestore import (
    FirestoreUserStore,
    decode_fields,
    document_to_user,
    encode_fields,
    encode_value,
)
from roster.services.list_view import ListStatus, ListViewController
from roster.services.query_cache import QueryCache

pytestmark = pytest.mark.asyncio(loop_scope="session")

DOCS = "/v1/projects/kula/databases/(default)/documents"


def _doc(user_id: str, **fields) -> dict:
    return {"name": f"projects/kula/databases/(default)/documents/users/{user_id}", "fields": encode_fields(fields)}


def _store(handler) -> FirestoreUserStore:
    return FirestoreUserStore(
        "kula",
        "web-key",
        database="(default)",
        collection="users",
        base_url="https://firestore.test/v1",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


# ============================================================================
# Value envelopes
# ============================================================================


def test_encode_value_types():
    assert encode_value("Ann") == {"stringValue": "Ann"}
    assert encode_value(5000) == {"integerValue": "5000"}
    assert encode_value(1250.5) == {"doubleValue": 1250.5}
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(None) == {"nullValue": None}


def test_decode_fields_nested():
    fields = {
        "tags": {"arrayValue": {"values": [{"stringValue": "a"}]}},
        "meta": {"mapValue": {"fields": {"n": {"integerValue": "3"}}}},
        "joined": {"timestampValue": "2024-01-01T00:00:00Z"},
    }
    assert decode_fields(fields) == {"tags": ["a"], "meta": {"n": 3}, "joined": "2024-01-01T00:00:00Z"}


def test_encode_value_rejects_unknown_types():
    with pytest.raises(TypeError):
        encode_value(object())


def test_document_to_user_uses_name_as_id():
    user = document_to_user(_doc("abc123", first_name="Ann", id="ignored", salary="5000"))
    assert user.id == "abc123"
    assert user.first_name == "Ann"
    assert user.salary == 5000


def test_document_to_user_fills_missing_fields():
    user = document_to_user({"name": "projects/kula/databases/(default)/documents/users/x"})
    assert user.first_name == ""
    assert user.salary == 0


def test_document_to_user_reads_mistyped_text_fields():
    user = document_to_user(_doc("7", first_name=42, last_name=True, role={"team": "core"}, email=["a@x.com"]))
    assert user.first_name == "42"
    assert user.last_name == "True"
    assert user.role == ""
    assert user.email == ""


# ============================================================================
# Operations
# ============================================================================


async def test_list_follows_page_tokens():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        assert request.url.path == f"{DOCS}/users"
        if "pageToken" not in request.url.params:
            return httpx.Response(200, json={"documents": [_doc("1", first_name="Ann")], "nextPageToken": "p2"})
        return httpx.Response(200, json={"documents": [_doc("2", first_name="Ravi")]})

    store = _store(handler)
    users = await store.list()
    await store.close()

    assert [u.id for u in users] == ["1", "2"]
    assert seen[0]["key"] == "web-key"
    assert seen[0]["pageSize"] == "300"
    assert seen[1]["pageToken"] == "p2"


async def test_list_empty_collection():
    store = _store(lambda request: httpx.Response(200, json={}))
    assert await store.list() == []
    await store.close()


async def test_list_tolerates_mistyped_document():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"documents": [_doc("1", first_name="Ann", salary=5000), _doc("2", first_name=42, salary="n/a")]},
        )

    store = _store(handler)
    users = await store.list()
    await store.close()

    assert [u.first_name for u in users] == ["Ann", "42"]
    assert users[1].salary == 0


async def test_list_view_loads_around_mistyped_document():
    documents = {"documents": [_doc("1", first_name="Ann"), _doc("2", first_name=42)]}
    store = _store(lambda request: httpx.Response(200, json=documents))
    view = ListViewController(store, QueryCache(ttl=60.0, retries=0, retry_base=0.0))
    await view.load()
    await store.close()

    assert view.status is ListStatus.READY
    assert [u.id for u in view.users] == ["1", "2"]


async def test_get_returns_record():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == f"{DOCS}/users/1"
        return httpx.Response(200, json=_doc("1", first_name="Ann", salary=5000))

    store = _store(handler)
    user = await store.get("1")
    await store.close()
    assert user.first_name == "Ann"
    assert user.salary == 5000


async def test_get_missing_returns_none():
    store = _store(lambda request: httpx.Response(404, json={"error": {"message": "not found"}}))
    assert await store.get("nope") is None
    await store.close()


async def test_add_posts_encoded_fields_and_returns_id():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_doc("newid", first_name="Priya"))

    store = _store(handler)
    user_id = await store.add({"first_name": "Priya", "salary": 25000})
    await store.close()

    assert user_id == "newid"
    assert captured["method"] == "POST"
    assert captured["body"]["fields"]["salary"] == {"integerValue": "25000"}


async def test_update_replaces_existing_document():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["params"] = dict(request.url.params)
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_doc("1"))

    store = _store(handler)
    await store.update("1", {"first_name": "Annie", "salary": 0})
    await store.close()

    assert captured["method"] == "PATCH"
    assert captured["params"]["currentDocument.exists"] == "true"
    assert "updateMask.fieldPaths" not in captured["params"]
    assert captured["body"]["fields"]["first_name"] == {"stringValue": "Annie"}


async def test_update_missing_raises_not_found():
    store = _store(lambda request: httpx.Response(404, json={"error": {"message": "no document"}}))
    with pytest.raises(NotFoundError):
        await store.update("gone", {"first_name": "X"})
    await store.close()


async def test_delete_sends_delete():
    methods = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(200, json={})

    store = _store(handler)
    await store.delete("1")
    await store.close()
    assert methods == ["DELETE"]


async def test_permission_denied_raises_remote_error():
    denied = {"error": {"message": "Missing or insufficient permissions."}}
    store = _store(lambda request: httpx.Response(403, json=denied))
    with pytest.raises(RemoteOperationError) as exc_info:
        await store.list()
    await store.close()
    assert exc_info.value.status_code == 403
    assert "insufficient permissions" in str(exc_info.value)


async def test_error_payload_as_list():
    store = _store(lambda request: httpx.Response(500, json=[{"error": {"message": "backend down"}}]))
    with pytest.raises(RemoteOperationError, match="backend down"):
        await store.delete("1")
    await store.close()


async def test_timeout_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    store = _store(handler)
    with pytest.raises(RemoteOperationError, match="timed out"):
        await store.get("1")
    await store.close()


async def test_connection_failure_raises_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    store = _store(handler)
    with pytest.raises(RemoteOperationError) as exc_info:
        await store.add({"first_name": "X"})
    await store.close()
    assert exc_info.value.operation == "add"
