"""Edamam Recipe Search API v2 client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from recipe_discovery.domain.errors import RateLimitedError

_RATE_LIMITED = 429


class RecipeSearchClient(Protocol):
    """Interface for recipe search API interactions."""

    async def search_recipes(self, query: str) -> dict[str, object]:
        """Search recipes by free-text query and return raw API data.

        Raises ``RateLimitedError`` when the provider throttles the query.
        """


@dataclass
class HttpxEdamamClient(RecipeSearchClient):
    """HTTPX-backed Edamam client."""

    app_id: str
    app_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls, app_id: str, app_key: str, base_url: str, timeout_seconds: float = 15.0
    ) -> "HttpxEdamamClient":
        """Create an Edamam client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_key=app_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_recipes(self, query: str) -> dict[str, object]:
        """Search public recipes matching the query."""
        url = f"{self.base_url}/api/recipes/v2"
        response = await self.http_client.get(
            url,
            params={
                "type": "public",
                "app_id": self.app_id,
                "app_key": self.app_key,
                "q": query,
            },
            timeout=self.timeout_seconds,
        )
        if response.status_code == _RATE_LIMITED:
            raise RateLimitedError(query)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
