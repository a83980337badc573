"""HTTP client for the upstream character/conversation API."""

import logging
import time
from typing import Any, Protocol

import httpx

from .config import SyncConfig
from .errors import ApiError

logger = logging.getLogger(__name__)

PAGE_SIZE = 25
CHARACTER_CONVERSATIONS_LIMIT = 100


class PageFetcher(Protocol):
    """Anything that can return one page of the global conversation list."""

    async def fetch_conversation_page(self, cursor: str | None = None) -> list[dict[str, Any]]:
        """Fetch one page, starting after cursor (or from the top if None)."""
        ...


class ApiClient:
    """Async client for the three endpoints the sync needs.

    Every failure (transport, HTTP status, unexpected body) surfaces as
    ApiError so callers only have one exception type to recover from.
    """

    def __init__(
        self,
        config: SyncConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers=config.headers(),
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a path relative to the base URL and decode the JSON body."""
        start = time.monotonic()
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(
                f"HTTP {e.response.status_code} for {path}",
                url=str(e.request.url),
                status_code=e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise ApiError(
                f"Request to {path} timed out after {self._config.timeout}s"
            ) from e
        except httpx.RequestError as e:
            raise ApiError(f"Request to {path} failed: {e}") from e

        logger.debug(
            "GET %s -> %d (%.0f ms)",
            response.url,
            response.status_code,
            (time.monotonic() - start) * 1000,
        )

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON from {path}",
                url=str(response.url),
                status_code=response.status_code,
            ) from e

    async def _get_list(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        data = await self.get_json(path, params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"Expected a list from {path}, got {type(data).__name__}")
        for item in data:
            if not isinstance(item, dict):
                raise ApiError(
                    f"Expected objects from {path}, got {type(item).__name__} item"
                )
        return data

    async def fetch_conversation_page(self, cursor: str | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"limit": PAGE_SIZE}
        if cursor:
            params["last_id"] = cursor
        return await self._get_list("/conversations", params)

    async def fetch_character_conversations(self, character_id: Any) -> list[dict[str, Any]]:
        return await self._get_list(
            f"/characters/{character_id}/conversations",
            {"limit": CHARACTER_CONVERSATIONS_LIMIT},
        )

    async def fetch_character(self, character_id: Any) -> dict[str, Any]:
        path = f"/characters/{character_id}"
        data = await self.get_json(path)
        if not isinstance(data, dict):
            raise ApiError(f"Expected an object from {path}, got {type(data).__name__}")
        return data
