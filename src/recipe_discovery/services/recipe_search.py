"""Concurrent recipe search across planned queries."""

import asyncio
import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from recipe_discovery.adapters.edamam_client import RecipeSearchClient
from recipe_discovery.domain.edamam import EdamamHit, EdamamSearchResponse
from recipe_discovery.domain.errors import (
    InvalidQueryError,
    RateLimitedError,
    TransportError,
)

_logger = logging.getLogger(__name__)


@dataclass
class RecipeSearchService:
    """Runs planned queries concurrently and aggregates their hits.

    A rate-limited query contributes no hits. Any other failure cancels the
    outstanding queries and is raised as ``TransportError``.
    """

    client: RecipeSearchClient
    timeout_seconds: float = 15.0

    async def search_all(self, queries: list[str]) -> list[EdamamHit]:
        """Return the hits of every query, failing fast on hard errors."""
        for query in queries:
            if not query.strip():
                raise InvalidQueryError("Planned recipe query is empty")
        if not queries:
            return []

        tasks = [asyncio.create_task(self._search_one(query)) for query in queries]
        try:
            done, pending = await asyncio.wait(
                tasks, return_when=asyncio.FIRST_EXCEPTION
            )
        except asyncio.CancelledError:
            await _cancel(tasks)
            raise

        if pending:
            await _cancel(list(pending))
        failures = [task.exception() for task in tasks if task in done]
        for failure in failures:
            if failure is not None:
                raise failure

        hits: list[EdamamHit] = []
        for task in tasks:
            hits.extend(task.result())
        return hits

    async def _search_one(self, query: str) -> list[EdamamHit]:
        try:
            async with asyncio.timeout(self.timeout_seconds):
                payload = await self.client.search_recipes(query)
        except RateLimitedError:
            _logger.warning("Rate limited on query '%s', skipping", query)
            return []
        except TimeoutError as exc:
            raise TransportError(f"Recipe search timed out for '{query}'") from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Recipe search failed for '{query}' "
                f"(status={_status_code_from_exception(exc)})"
            ) from exc
        except ValueError as exc:
            raise TransportError(
                f"Recipe search returned an undecodable body for '{query}'"
            ) from exc

        try:
            response = EdamamSearchResponse.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(
                f"Recipe search returned an invalid payload for '{query}'"
            ) from exc
        _logger.info("Query '%s' returned %s hits", query, len(response.hits))
        return response.hits


async def _cancel(tasks: list[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
