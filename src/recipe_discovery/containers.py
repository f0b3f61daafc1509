"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import create_client

from recipe_discovery.adapters.edamam_client import HttpxEdamamClient
from recipe_discovery.adapters.supabase_pantry_repository import (
    SupabasePantryRepository,
)
from recipe_discovery.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_discovery.config import Settings
from recipe_discovery.services.recipe_search import RecipeSearchService
from recipe_discovery.services.recipes import (
    EngineLimits,
    PantryRepository,
    RecipeDiscoveryService,
    RecipeEngineRegistry,
    RecipeRepository,
)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recipe_search_service: RecipeSearchService
    recipe_repository: RecipeRepository
    pantry_repository: PantryRepository
    recipe_engines: RecipeEngineRegistry
    close_resources: Callable[[], Awaitable[None]]


def engine_limits(settings: Settings) -> EngineLimits:
    """Translate settings into engine bounds."""
    return EngineLimits(
        max_queries=settings.max_queries,
        max_per_ingredient=settings.max_per_ingredient,
        max_missing=settings.max_missing_ingredients,
        max_results=settings.max_results,
        expiring_within_days=settings.expiring_within_days,
    )


def build_registry(
    settings: Settings,
    search_service: RecipeSearchService,
    recipe_repository: RecipeRepository,
    pantry_repository: PantryRepository,
) -> RecipeEngineRegistry:
    """Create a registry building one engine per pantry owner."""
    limits = engine_limits(settings)

    def factory(owner_id: UUID | None) -> RecipeDiscoveryService:
        return RecipeDiscoveryService(
            search_service=search_service,
            repository=recipe_repository,
            pantry_repository=pantry_repository,
            owner_id=owner_id,
            limits=limits,
        )

    return RecipeEngineRegistry(factory=factory)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    pantry_repository = SupabasePantryRepository(supabase_client)
    edamam_client = HttpxEdamamClient.create(
        app_id=resolved_settings.edamam_app_id,
        app_key=resolved_settings.edamam_app_key,
        base_url=resolved_settings.edamam_base_url,
        timeout_seconds=resolved_settings.search_timeout_seconds,
    )
    search_service = RecipeSearchService(
        client=edamam_client,
        timeout_seconds=resolved_settings.search_timeout_seconds,
    )
    registry = build_registry(
        resolved_settings, search_service, recipe_repository, pantry_repository
    )

    async def close_resources() -> None:
        await edamam_client.close()

    return AppContainer(
        settings=resolved_settings,
        recipe_search_service=search_service,
        recipe_repository=recipe_repository,
        pantry_repository=pantry_repository,
        recipe_engines=registry,
        close_resources=close_resources,
    )
