"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, Request

from recipe_discovery.api.admin import router as admin_router
from recipe_discovery.api.models import PantryEvent, PantrySnapshot
from recipe_discovery.app_logging import configure_logging
from recipe_discovery.containers import AppContainer
from recipe_discovery.domain.recipes import RecipeFeed


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/owners/{owner_id}/recipes")
    async def load_recipes(
        owner_id: UUID, request: Request, force: bool = False
    ) -> dict[str, object]:
        """Return the ranked recipe list, loading it once per session."""
        engine = _container(request).recipe_engines.engine_for(owner_id)
        return _feed_response(await engine.load_recipes(force=force))

    @app.post("/owners/{owner_id}/recipes/generate")
    async def generate_recipes(
        owner_id: UUID, request: Request, snapshot: PantrySnapshot | None = None
    ) -> dict[str, object]:
        """Generate recipes when the pantry set changed since the last run."""
        engine = _container(request).recipe_engines.engine_for(owner_id)
        pantry = snapshot.to_ingredients() if snapshot is not None else None
        return _feed_response(await engine.generate_if_needed(pantry))

    @app.post("/owners/{owner_id}/recipes/prune")
    async def prune_recipes(
        owner_id: UUID, request: Request, snapshot: PantrySnapshot | None = None
    ) -> dict[str, object]:
        """Drop recipes relying on items missing from the remaining pantry."""
        engine = _container(request).recipe_engines.engine_for(owner_id)
        remaining = snapshot.to_ingredients() if snapshot is not None else None
        return _feed_response(await engine.prune_if_needed(remaining))

    @app.post("/owners/{owner_id}/recipes/refresh")
    async def refresh_recipes(owner_id: UUID, request: Request) -> dict[str, object]:
        """Reload from the store and regenerate from the current pantry."""
        engine = _container(request).recipe_engines.engine_for(owner_id)
        return _feed_response(await engine.force_refresh())

    @app.delete("/owners/{owner_id}/recipes/{recipe_id}")
    async def delete_recipe(
        owner_id: UUID, recipe_id: UUID, request: Request
    ) -> dict[str, object]:
        """Delete a single recipe."""
        engine = _container(request).recipe_engines.engine_for(owner_id)
        return _feed_response(await engine.delete_recipe(recipe_id))

    @app.post("/owners/{owner_id}/pantry/events")
    async def pantry_event(
        owner_id: UUID, event: PantryEvent, request: Request
    ) -> dict[str, object]:
        """Handle pantry change notifications from the inventory app."""
        registry = _container(request).recipe_engines
        logger.info("Pantry %s event for owner %s", event.event, owner_id)
        if event.event == "added":
            feed = await registry.on_items_added(owner_id)
        else:
            feed = await registry.on_items_removed(owner_id)
        return _feed_response(feed)

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _feed_response(feed: RecipeFeed) -> dict[str, object]:
    return {
        "recipes": [
            {
                "id": str(recipe.id),
                "label": recipe.label,
                "image": recipe.image,
                "source_url": recipe.source_url,
                "source_publisher": recipe.source_publisher,
                "yield": recipe.servings,
                "total_time": recipe.total_time_minutes,
                "ingredient_lines": list(recipe.ingredient_lines),
                "cuisine_type": recipe.cuisine_type and list(recipe.cuisine_type),
                "meal_type": recipe.meal_type and list(recipe.meal_type),
                "pantry_items_used": list(recipe.pantry_items_used),
                "expiring_items_used": list(recipe.expiring_items_used),
                "generated_from": list(recipe.generated_from),
                "missing_count": recipe.missing_count,
                "created_at": (
                    recipe.created_at.isoformat() if recipe.created_at else None
                ),
            }
            for recipe in feed.recipes
        ],
        "error": feed.error_message,
    }
