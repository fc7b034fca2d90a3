import logging
from typing import Any

import httpx

from src.config.backend import NotionConfig

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class NotionAPIError(Exception):
    """Raised when the Notion API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Notion API error {status_code}: {message}")


class NotionClient:
    """
    Thin wrapper over the Notion REST API.

    Databases are queried through the stable ``databases/{id}/query``
    endpoint, which works for every database the integration can see.
    """

    def __init__(
        self,
        config: NotionConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    @property
    def config(self) -> NotionConfig:
        return self._config

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "Notion-Version": self._config.version,
        }

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict[str, Any]:
        url = f"{self._config.api_url}{path}"
        async with self._http_client_class() as client:
            response = await client.request(method, url, headers=self._headers(), json=json)

        if response.status_code >= 400:
            try:
                message = response.json().get("message") or ""
            except ValueError:
                message = ""
            logger.error(f"Notion {method} {path} failed with {response.status_code}: {message}")
            raise NotionAPIError(response.status_code, message or f"HTTP {response.status_code}")

        return response.json()

    async def query_database(self, database_id: str, body: dict | None = None) -> dict[str, Any]:
        return await self._request("POST", f"/databases/{database_id}/query", json=body or {})

    async def query_all(self, database_id: str, body: dict | None = None) -> list[dict[str, Any]]:
        """Query a database and follow ``next_cursor`` until every page is read."""
        results: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            payload = {**(body or {}), "page_size": PAGE_SIZE}
            if cursor:
                payload["start_cursor"] = cursor
            response = await self.query_database(database_id, payload)
            results.extend(response.get("results", []))

            cursor = response.get("next_cursor") if response.get("has_more") else None
            if not cursor:
                return results

    async def retrieve_page(self, page_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/pages/{page_id}")

    async def create_page(self, database_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/pages",
            json={
                "parent": {"type": "database_id", "database_id": database_id},
                "properties": properties,
            },
        )

    async def update_page(
        self,
        page_id: str,
        properties: dict[str, Any] | None = None,
        archived: bool | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if properties is not None:
            body["properties"] = properties
        if archived is not None:
            body["archived"] = archived
        return await self._request("PATCH", f"/pages/{page_id}", json=body)
