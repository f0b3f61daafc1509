"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import pytest

from recipe_discovery.adapters.edamam_client import RecipeSearchClient
from recipe_discovery.config import Settings
from recipe_discovery.containers import AppContainer, build_registry
from recipe_discovery.domain.errors import RateLimitedError
from recipe_discovery.domain.pantry import PantryIngredient
from recipe_discovery.domain.recipes import MatchedRecipe
from recipe_discovery.services.recipe_search import RecipeSearchService
from recipe_discovery.services.recipes import (
    PantryRepository,
    RecipeDiscoveryService,
    RecipeRepository,
)


def edamam_recipe(
    label: str,
    url: str | None = None,
    lines: list[str] | None = None,
    foods: list[str] | None = None,
) -> dict[str, object]:
    """Build an Edamam hit payload."""
    return {
        "recipe": {
            "uri": f"http://www.edamam.com/ontologies/edamam.owl#{label}",
            "label": label,
            "url": url,
            "source": "Test Kitchen",
            "yield": 4.0,
            "totalTime": "30",
            "ingredientLines": lines or [],
            "ingredients": [{"text": food, "food": food} for food in foods or []],
            "cuisineType": ["american"],
            "mealType": ["lunch/dinner"],
        }
    }


def pantry_item(
    name: str,
    days: int = 10,
    generic_name: str | None = None,
    expired: bool = False,
) -> PantryIngredient:
    return PantryIngredient(
        display_name=name,
        generic_name=generic_name,
        days_until_expiration=days,
        is_expired=expired,
    )


@dataclass
class FakeRecipeSearchClient(RecipeSearchClient):
    """Fake search client returning canned hits per query."""

    hits_by_query: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    default_hits: list[dict[str, object]] = field(default_factory=list)
    rate_limited: set[str] = field(default_factory=set)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def search_recipes(self, query: str) -> dict[str, object]:
        self.calls.append(query)
        if query in self.rate_limited:
            raise RateLimitedError(query)
        if query in self.failures:
            raise self.failures[query]
        return {"hits": self.hits_by_query.get(query, self.default_hits)}


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe store for tests."""

    recipes: list[MatchedRecipe] = field(default_factory=list)
    fail_fetch: bool = False
    fail_delete: set[UUID] = field(default_factory=set)
    fetch_calls: int = 0
    inserted: list[MatchedRecipe] = field(default_factory=list)

    def fetch_all(self, owner_id: UUID | None) -> list[MatchedRecipe]:
        self.fetch_calls += 1
        if self.fail_fetch:
            raise RuntimeError("database unavailable")
        floor = datetime.min.replace(tzinfo=UTC)
        owned = [
            recipe
            for recipe in self.recipes
            if owner_id is None or recipe.owner_id == owner_id
        ]
        return sorted(owned, key=lambda r: r.created_at or floor, reverse=True)

    def insert_many(self, recipes: list[MatchedRecipe]) -> None:
        self.inserted.extend(recipes)
        self.recipes.extend(recipes)

    def delete_one(self, recipe_id: UUID) -> None:
        if recipe_id in self.fail_delete:
            raise RuntimeError("delete rejected")
        self.recipes = [recipe for recipe in self.recipes if recipe.id != recipe_id]


@dataclass
class InMemoryPantryRepository(PantryRepository):
    """In-memory pantry snapshot provider for tests."""

    items: list[PantryIngredient] = field(default_factory=list)

    def current_items(self, owner_id: UUID | None) -> list[PantryIngredient]:
        return list(self.items)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        edamam_app_id="app-id",
        edamam_app_key="app-key",
    )


@pytest.fixture
def search_client() -> FakeRecipeSearchClient:
    return FakeRecipeSearchClient()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def pantry_repository() -> InMemoryPantryRepository:
    return InMemoryPantryRepository()


@pytest.fixture
def engine(
    search_client: FakeRecipeSearchClient,
    recipe_repository: InMemoryRecipeRepository,
    pantry_repository: InMemoryPantryRepository,
) -> RecipeDiscoveryService:
    return RecipeDiscoveryService(
        search_service=RecipeSearchService(search_client, timeout_seconds=1.0),
        repository=recipe_repository,
        pantry_repository=pantry_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    search_client: FakeRecipeSearchClient,
    recipe_repository: InMemoryRecipeRepository,
    pantry_repository: InMemoryPantryRepository,
) -> AppContainer:
    search_service = RecipeSearchService(search_client, timeout_seconds=1.0)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        recipe_search_service=search_service,
        recipe_repository=recipe_repository,
        pantry_repository=pantry_repository,
        recipe_engines=build_registry(
            settings, search_service, recipe_repository, pantry_repository
        ),
        close_resources=close_resources,
    )
