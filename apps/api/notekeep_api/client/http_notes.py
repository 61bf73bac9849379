from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..domain.entities import Note
from ..domain.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger("notekeep.client")

NETWORK_ERROR_MESSAGE = "Network error. Please try again."


def _join_base(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def _note_from_payload(data: Any) -> Note:
    if not isinstance(data, dict):
        raise PersistenceError("bad_response")
    try:
        return Note(
            id=str(data["id"]),
            title=data.get("title"),
            content=str(data.get("content") or ""),
            user_id=str(data.get("user_id") or ""),
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )
    except KeyError as e:
        raise PersistenceError("bad_response") from e


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str) and detail:
            return detail
    return "Something went wrong"


class HttpNotesService:
    """
    Notes Service backed by the notekeep REST API.

    Pass ``client`` to share a connection pool or to route requests through a
    custom transport; otherwise one is created and owned by this instance.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout_s: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    @classmethod
    def from_settings(
        cls, settings: Settings, *, token: str | None = None, client: httpx.AsyncClient | None = None
    ) -> HttpNotesService:
        return cls(settings.notes_api_base_url, token=token or settings.api_auth_token, client=client)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpNotesService:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, json: dict | None = None, params: dict | None = None) -> Any:
        url = _join_base(self.base_url, path)
        try:
            resp = await self._client.request(method, url, headers=self._headers, json=json, params=params)
        except httpx.HTTPError as e:
            logger.warning("notes_request_failed", extra={"method": method, "url": url, "error": str(e)})
            raise PersistenceError(NETWORK_ERROR_MESSAGE) from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.info("notes_http_error", extra={"method": method, "url": url, "status": resp.status_code})
            raise PersistenceError(message, status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise PersistenceError("bad_response") from e
        if not isinstance(body, dict):
            raise PersistenceError("bad_response")
        return body.get("data")

    async def fetch_note(self, note_id: str) -> Note:
        try:
            data = await self._request("GET", f"/notes/get-note/{note_id}")
        except PersistenceError as e:
            if e.status_code == 404:
                raise NotFoundError(e.message) from e
            raise
        return _note_from_payload(data)

    async def create_note(self, title: str | None, content: str) -> Note:
        payload: dict[str, Any] = {"content": content}
        if title is not None:
            payload["title"] = title
        data = await self._request("POST", "/notes/create-note", json=payload)
        return _note_from_payload(data)

    async def edit_note(self, note_id: str, title: str | None, content: str) -> Note:
        payload: dict[str, Any] = {"id": note_id, "content": content}
        if title is not None:
            payload["title"] = title
        data = await self._request("PATCH", "/notes/edit-note", json=payload)
        return _note_from_payload(data)

    async def delete_note(self, note_id: str) -> Note:
        data = await self._request("DELETE", f"/notes/delete-note/{note_id}")
        return _note_from_payload(data)

    async def list_notes(self) -> list[Note]:
        data = await self._request("GET", "/notes/get-notes")
        return [_note_from_payload(n) for n in data or []]

    async def search_notes(self, query: str) -> list[Note]:
        data = await self._request("GET", "/notes/search", params={"query": query})
        return [_note_from_payload(n) for n in data or []]

    async def total_notes(self) -> int:
        data = await self._request("GET", "/notes/get-total-notes")
        if not isinstance(data, dict):
            raise PersistenceError("bad_response")
        return int(data.get("total_notes") or 0)
