"""
SnapShelf API client.
Async HTTP access to the gateway endpoints, one method per operation.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from snapshelf.app.domain.models import ChatTurn, ItemKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return fallback


def _json_body(response: httpx.Response, fallback: str) -> Any:
    try:
        return response.json()
    except ValueError as error:
        logger.error("Non-JSON %s response from %s", response.status_code, response.request.url)
        raise ApiError(fallback, response.status_code) from error


def _analyze_error(response: httpx.Response) -> ApiError:
    status = response.status_code
    if status == 429:
        message = "Too many requests. Please wait a minute and try again."
    elif status == 413:
        message = "Files are too large. Try uploading fewer pages or smaller images."
    elif status == 401:
        message = "Authentication failed. Please check your API setup."
    else:
        message = f"API request failed ({status}): {_error_message(response, 'Unknown error')}"
    return ApiError(message, status)


class SnapShelfApiClient:
    """
    Thin wrapper over httpx.AsyncClient.

    Every method raises ApiError carrying the server's {"error": ...} message
    when the response is not a success.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SnapShelfApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _send(self, method: str, url: str, fallback: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as error:
            logger.error("%s %s failed: %s", method, url, error)
            raise ApiError(f"{fallback}: {error}") from error
        if response.is_error:
            raise ApiError(_error_message(response, fallback), response.status_code)
        return _json_body(response, fallback)

    async def list_items(self, kind: ItemKind | str, user_name: str) -> list[dict[str, Any]]:
        kind = ItemKind(kind)
        return await self._send(
            "GET",
            f"/api/get{kind.table}",
            f"Failed to load {kind.table}",
            params={"user_name": user_name},
        )

    async def save_item(self, kind: ItemKind | str, fields: dict[str, Any]) -> dict[str, Any]:
        kind = ItemKind(kind)
        return await self._send("POST", f"/api/save{kind.value}", f"Failed to save {kind.value}", json=fields)

    async def delete_item(self, kind: ItemKind | str, item_id: Any, user_name: str) -> None:
        kind = ItemKind(kind)
        await self._send(
            "DELETE",
            f"/api/delete{kind.value}",
            f"Failed to delete {kind.value}",
            json={f"{kind.value}_id": item_id, "user_name": user_name},
        )

    async def analyze(self, content: list[dict[str, Any]]) -> str:
        """Send extraction blocks; return the model's raw reply text."""
        try:
            # No client-side deadline; the controller owns the wall-clock timeout
            response = await self._client.post("/api/analyze", json={"content": content}, timeout=None)
        except httpx.HTTPError as error:
            raise ApiError(f"Failed to analyze: {error}") from error
        if response.is_error:
            raise _analyze_error(response)

        data = _json_body(response, "Analysis response was not valid JSON")
        try:
            return str(data["content"][0]["text"])
        except (KeyError, IndexError, TypeError) as error:
            raise ApiError("Analysis response had no text content", response.status_code) from error

    async def get_suggestions(self, user_name: str, wine_type: Optional[str] = None) -> dict[str, Any]:
        params = {"user_name": user_name}
        if wine_type:
            params["wine_type"] = wine_type
        return await self._send(
            "GET",
            "/api/getsuggestions",
            "Failed to generate suggestions",
            params=params,
            timeout=None,
        )

    async def chat(self, user_name: str, message: str, history: Sequence[ChatTurn]) -> str:
        data = await self._send(
            "POST",
            "/api/chatsuggestions",
            "Failed to process chat message",
            json={
                "user_name": user_name,
                "message": message,
                "chat_history": [turn.to_dict() for turn in history],
            },
            timeout=None,
        )
        try:
            return str(data["response"])
        except (KeyError, TypeError) as error:
            raise ApiError("Failed to process chat message") from error
