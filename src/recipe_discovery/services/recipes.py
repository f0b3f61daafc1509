"""Recipe discovery engine: generation caching, persistence and pruning."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TypeVar
from uuid import UUID

from recipe_discovery.domain.errors import RecipeDiscoveryError, StoreError
from recipe_discovery.domain.pantry import PantryIngredient
from recipe_discovery.domain.recipes import (
    GenerationCacheState,
    MatchedRecipe,
    RecipeFeed,
)
from recipe_discovery.services.candidates import build_candidates
from recipe_discovery.services.fairness import (
    MAX_PER_INGREDIENT,
    limit_per_ingredient,
)
from recipe_discovery.services.matching import (
    STAPLES,
    expiring_terms,
    match_candidate,
    normalize_ingredients,
    refresh_expiring,
)
from recipe_discovery.services.query_planner import MAX_QUERIES, plan_queries
from recipe_discovery.services.ranking import MAX_MISSING, MAX_RESULTS, rank_recipes
from recipe_discovery.services.recipe_search import RecipeSearchService

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class RecipeRepository(Protocol):
    """Persistence interface for matched recipes."""

    def fetch_all(self, owner_id: UUID | None) -> list[MatchedRecipe]:
        """Return stored recipes for an owner, newest first."""

    def insert_many(self, recipes: list[MatchedRecipe]) -> None:
        """Insert recipes; the store does not deduplicate."""

    def delete_one(self, recipe_id: UUID) -> None:
        """Delete a stored recipe."""


class PantryRepository(Protocol):
    """Read interface for the pantry inventory."""

    def current_items(self, owner_id: UUID | None) -> list[PantryIngredient]:
        """Return a snapshot of the owner's pantry."""


@dataclass(frozen=True)
class EngineLimits:
    """Tunable bounds for query planning, fairness and ranking."""

    max_queries: int = MAX_QUERIES
    max_per_ingredient: int = MAX_PER_INGREDIENT
    max_missing: int = MAX_MISSING
    max_results: int = MAX_RESULTS
    expiring_within_days: int = 3


@dataclass
class RecipeDiscoveryService:
    """Per-owner engine turning pantry snapshots into ranked recipes.

    Every public operation runs under one lock, so loads, generations,
    prunes and deletes for the owner never interleave. Failures are reported
    through ``RecipeFeed.error_message`` and leave the cache state as it was.
    """

    search_service: RecipeSearchService
    repository: RecipeRepository
    pantry_repository: PantryRepository
    owner_id: UUID | None = None
    limits: EngineLimits = field(default_factory=EngineLimits)
    state: GenerationCacheState = field(default_factory=GenerationCacheState)
    recipes: list[MatchedRecipe] = field(default_factory=list)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def load_recipes(self, force: bool = False) -> RecipeFeed:
        """Load the authoritative recipe list once per session.

        Later calls only recompute expiring ingredients against the current
        pantry, unless ``force`` is set.
        """
        async with self._lock:
            return await self._load(force=force)

    async def generate_if_needed(
        self, pantry: list[PantryIngredient] | None = None
    ) -> RecipeFeed:
        """Run a remote generation unless the pantry set is unchanged."""
        async with self._lock:
            try:
                snapshot = self._resolve_snapshot(pantry)
            except StoreError as exc:
                return self._failure("Failed to read pantry", exc)
            return await self._generate(snapshot)

    async def prune_if_needed(
        self, remaining: list[PantryIngredient] | None = None
    ) -> RecipeFeed:
        """Remove recipes that rely on items no longer in the pantry."""
        async with self._lock:
            try:
                snapshot = self._resolve_snapshot(remaining)
            except StoreError as exc:
                return self._failure("Failed to read pantry", exc)
            return await self._prune(snapshot)

    async def force_refresh(self) -> RecipeFeed:
        """Reload from the store and regenerate from the current pantry."""
        async with self._lock:
            self.state.reset()
            feed = await self._load(force=True)
            if feed.error_message:
                return feed
            try:
                snapshot = self._resolve_snapshot(None)
            except StoreError as exc:
                return self._failure("Failed to read pantry", exc)
            return await self._generate(snapshot)

    async def delete_recipe(self, recipe_id: UUID) -> RecipeFeed:
        """Delete a recipe from the working list and the store.

        The working list is left unchanged when the store rejects the delete.
        """
        async with self._lock:
            previous = self.recipes
            self.recipes = [
                recipe for recipe in self.recipes if recipe.id != recipe_id
            ]
            try:
                self._store_call(lambda: self.repository.delete_one(recipe_id))
            except StoreError as exc:
                self.recipes = previous
                return self._failure("Failed to delete recipe", exc)
            return self._feed()

    def cache_state(self) -> GenerationCacheState:
        """Return a copy of the generation cache state."""
        return GenerationCacheState(
            last_generated_set=self.state.last_generated_set,
            initialized=self.state.initialized,
        )

    async def _load(self, force: bool) -> RecipeFeed:
        try:
            if self.state.initialized and not force:
                self.recipes = self._reconcile(
                    self.recipes, self._resolve_snapshot(None)
                )
                return self._feed()
            stored = self._store_call(
                lambda: self.repository.fetch_all(self.owner_id)
            )
            pantry = self._resolve_snapshot(None)
        except StoreError as exc:
            return self._failure("Failed to load recipes", exc)

        self.recipes = self._reconcile(stored, pantry)
        newest = _newest(stored)
        if newest is not None:
            self.state.last_generated_set = frozenset(
                term.lower() for term in newest.generated_from
            )
        self.state.initialized = True
        _logger.info(
            "Loaded %s stored recipes (%s ranked)", len(stored), len(self.recipes)
        )
        return self._feed()

    async def _generate(self, pantry: list[PantryIngredient]) -> RecipeFeed:
        terms = normalize_ingredients(pantry)
        if not terms:
            _logger.info("Pantry is empty, skipping recipe generation")
            return self._feed()
        current_set = frozenset(terms)
        if current_set == self.state.last_generated_set:
            _logger.info("Skipping recipe search, pantry set unchanged")
            return self._feed()

        queries = plan_queries(terms, self.limits.max_queries)
        _logger.info("Generating recipes with %s queries: %s", len(queries), queries)
        expiring = expiring_terms(pantry, self.limits.expiring_within_days)
        try:
            hits = await self.search_service.search_all(queries)
            matched = [
                match_candidate(candidate, terms, expiring, owner_id=self.owner_id)
                for candidate in build_candidates(hits)
            ]
            fresh = self._limit_and_rank(matched)
            existing = self._store_call(
                lambda: self.repository.fetch_all(self.owner_id)
            )
            known = {recipe.identity_key for recipe in existing}
            to_insert = [
                recipe for recipe in fresh if recipe.identity_key not in known
            ]
            if to_insert:
                self._store_call(lambda: self.repository.insert_many(to_insert))
                _logger.info("Inserted %s new recipes", len(to_insert))
            else:
                _logger.info("No new recipes to insert")
            refreshed = self._store_call(
                lambda: self.repository.fetch_all(self.owner_id)
            )
        except asyncio.CancelledError:
            _logger.info("Recipe generation was cancelled")
            raise
        except RecipeDiscoveryError as exc:
            return self._failure("Recipe generation failed", exc)

        self.recipes = self._reconcile(refreshed, pantry)
        self.state.last_generated_set = current_set
        return self._feed()

    async def _prune(self, remaining: list[PantryIngredient]) -> RecipeFeed:
        if not self.state.initialized:
            feed = await self._load(force=False)
            if feed.error_message:
                return feed
        try:
            stored = self._store_call(
                lambda: self.repository.fetch_all(self.owner_id)
            )
        except StoreError as exc:
            return self._failure("Failed to prune recipes", exc)

        available = set(normalize_ingredients(remaining)) | set(STAPLES)
        stale = {
            recipe.id: recipe
            for recipe in [*stored, *self.recipes]
            if not {term.lower() for term in recipe.pantry_items_used} <= available
        }
        if not stale:
            return self._feed()

        self.recipes = self._reconcile(
            [recipe for recipe in stored if recipe.id not in stale], remaining
        )
        self.state.last_generated_set = frozenset()
        for recipe in stale.values():
            try:
                self._store_call(
                    lambda recipe_id=recipe.id: self.repository.delete_one(recipe_id)
                )
            except StoreError as exc:
                _logger.warning("Failed to prune recipe %s: %s", recipe.label, exc)
                continue
            _logger.info("Pruned recipe %s", recipe.label)

        if not remaining:
            return self._feed()
        feed = await self._generate(remaining)
        # Rows whose delete failed are still in the store.
        self.recipes = [recipe for recipe in self.recipes if recipe.id not in stale]
        return self._feed(feed.error_message)

    def _reconcile(
        self, recipes: list[MatchedRecipe], pantry: list[PantryIngredient]
    ) -> list[MatchedRecipe]:
        expiring = expiring_terms(pantry, self.limits.expiring_within_days)
        return self._limit_and_rank(refresh_expiring(recipes, expiring))

    def _limit_and_rank(self, recipes: list[MatchedRecipe]) -> list[MatchedRecipe]:
        limited = limit_per_ingredient(recipes, self.limits.max_per_ingredient)
        return rank_recipes(
            limited,
            max_missing=self.limits.max_missing,
            max_results=self.limits.max_results,
        )

    def _resolve_snapshot(
        self, pantry: list[PantryIngredient] | None
    ) -> list[PantryIngredient]:
        if pantry is not None:
            return pantry
        return self._store_call(
            lambda: self.pantry_repository.current_items(self.owner_id)
        )

    def _feed(self, error_message: str | None = None) -> RecipeFeed:
        return RecipeFeed(recipes=list(self.recipes), error_message=error_message)

    def _failure(self, action: str, exc: Exception) -> RecipeFeed:
        _logger.warning("%s: %s", action, exc)
        return self._feed(f"{action}: {exc}. Please try again.")

    @staticmethod
    def _store_call(func: Callable[[], _T]) -> _T:
        """Run a store operation, reporting any failure as ``StoreError``."""
        try:
            return func()
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(str(exc) or type(exc).__name__) from exc


@dataclass
class RecipeEngineRegistry:
    """Creates and reuses one engine per pantry owner."""

    factory: Callable[[UUID | None], RecipeDiscoveryService]
    engines: dict[UUID | None, RecipeDiscoveryService] = field(default_factory=dict)

    def engine_for(self, owner_id: UUID | None) -> RecipeDiscoveryService:
        """Return the engine serializing operations for an owner."""
        engine = self.engines.get(owner_id)
        if engine is None:
            engine = self.factory(owner_id)
            self.engines[owner_id] = engine
        return engine

    async def on_items_added(self, owner_id: UUID | None) -> RecipeFeed:
        """Pantry hook for added or changed items."""
        return await self.engine_for(owner_id).generate_if_needed()

    async def on_items_removed(self, owner_id: UUID | None) -> RecipeFeed:
        """Pantry hook for removed or consumed items."""
        return await self.engine_for(owner_id).prune_if_needed()


def _newest(recipes: list[MatchedRecipe]) -> MatchedRecipe | None:
    if not recipes:
        return None
    floor = datetime.min.replace(tzinfo=UTC)
    return max(recipes, key=lambda recipe: recipe.created_at or floor)
