"""HTTP client for the hosted document database's REST surface."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from roster import config
from roster.errors import NotFoundError, RemoteOperationError
from roster.models.user import UserRecord
from roster.repos.base import UserStore

logger = logging.getLogger(__name__)

_PAGE_SIZE = 300

_TEXT_FIELDS = ("first_name", "last_name", "email", "avatar", "role")


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a Python value in the typed value envelope the REST API expects."""
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a document value")


def decode_value(envelope: dict[str, Any]) -> Any:
    """Unwrap one typed value envelope."""
    if "stringValue" in envelope:
        return envelope["stringValue"]
    if "integerValue" in envelope:
        return int(envelope["integerValue"])
    if "doubleValue" in envelope:
        return float(envelope["doubleValue"])
    if "booleanValue" in envelope:
        return envelope["booleanValue"]
    if "nullValue" in envelope:
        return None
    if "arrayValue" in envelope:
        return [decode_value(v) for v in envelope["arrayValue"].get("values", [])]
    if "mapValue" in envelope:
        return decode_fields(envelope["mapValue"].get("fields", {}))
    # timestampValue, referenceValue, geoPointValue, bytesValue: keep the raw payload
    return next(iter(envelope.values()), None)


def encode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: encode_value(v) for k, v in fields.items()}


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


def document_to_user(document: dict[str, Any]) -> UserRecord:
    """Convert a REST document to a UserRecord. The id is the last segment of the document name."""
    user_id = document["name"].rsplit("/", 1)[-1]
    data = {k: v for k, v in decode_fields(document.get("fields", {})).items() if v is not None}
    data.pop("id", None)
    for name in _TEXT_FIELDS:
        if name in data:
            data[name] = _coerce_text(data[name])
    data["salary"] = _coerce_salary(data.get("salary"))
    return UserRecord(id=user_id, **data)


class FirestoreUserStore(UserStore):
    """
    Users collection in the hosted document database.

    Authenticates with the project's web API key, the same credential the
    browser client uses. Access control is left to the database's security rules.
    """

    def __init__(
        self,
        project_id: str | None = None,
        api_key: str | None = None,
        *,
        database: str | None = None,
        collection: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        project_id = project_id or config.settings.FIRESTORE_PROJECT_ID
        database = database or config.settings.FIRESTORE_DATABASE
        base_url = (base_url or config.settings.FIRESTORE_BASE_URL).rstrip("/")
        self._collection = collection or config.settings.USERS_COLLECTION
        self._api_key = api_key or config.settings.FIRESTORE_API_KEY
        self._client = httpx.AsyncClient(
            base_url=f"{base_url}/projects/{project_id}/databases/{database}/documents",
            timeout=timeout if timeout is not None else config.settings.STORE_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        allow_404: bool = False,
    ) -> httpx.Response:
        """
        Send one request and translate transport failures.

        Raises:
            RemoteOperationError: On timeout, connection failure or a non-2xx status
                (404 passes through when allow_404 is set)
        """
        query = {"key": self._api_key, **(params or {})}
        try:
            response = await self._client.request(method, path, params=query, json=json)
        except httpx.TimeoutException as e:
            logger.warning("firestore: %s timed out", operation)
            raise RemoteOperationError(operation, "timed out") from e
        except httpx.HTTPError as e:
            logger.warning("firestore: %s failed: %s", operation, e)
            raise RemoteOperationError(operation, str(e)) from e

        if response.status_code == 404 and allow_404:
            return response
        if response.is_error:
            logger.warning("firestore: %s returned %d", operation, response.status_code)
            raise RemoteOperationError(operation, _error_message(response), status_code=response.status_code)
        return response

    async def list(self) -> list[UserRecord]:
        users: list[UserRecord] = []
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {"pageSize": _PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            response = await self._request("list", "GET", f"/{self._collection}", params=params)
            payload = response.json()
            users.extend(document_to_user(doc) for doc in payload.get("documents", []))
            page_token = payload.get("nextPageToken")
            if not page_token:
                return users

    async def get(self, user_id: str) -> UserRecord | None:
        response = await self._request("get", "GET", f"/{self._collection}/{user_id}", allow_404=True)
        if response.status_code == 404:
            return None
        return document_to_user(response.json())

    async def add(self, fields: dict[str, Any]) -> str:
        response = await self._request("add", "POST", f"/{self._collection}", json={"fields": encode_fields(fields)})
        user_id = response.json()["name"].rsplit("/", 1)[-1]
        logger.info("firestore: added user %s", user_id)
        return user_id

    async def update(self, user_id: str, fields: dict[str, Any]) -> None:
        # No updateMask: the document's fields are replaced wholesale.
        # currentDocument.exists stops PATCH from creating a missing document.
        response = await self._request(
            "update",
            "PATCH",
            f"/{self._collection}/{user_id}",
            params={"currentDocument.exists": "true"},
            json={"fields": encode_fields(fields)},
            allow_404=True,
        )
        if response.status_code == 404:
            raise NotFoundError(user_id)

    async def delete(self, user_id: str) -> None:
        await self._request("delete", "DELETE", f"/{self._collection}/{user_id}")
        logger.info("firestore: deleted user %s", user_id)

    async def close(self) -> None:
        await self._client.aclose()


def _coerce_text(value: Any) -> str:
    """Other clients may store names as numbers; maps and arrays are unreadable as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return ""


def _coerce_salary(value: Any) -> int | float:
    """Salaries written by older form versions may be strings, or missing."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    if not isinstance(payload, dict):
        return ""
    return payload.get("error", {}).get("message", "")
