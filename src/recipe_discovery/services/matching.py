"""Matching of recipe candidates against pantry snapshots."""

from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from recipe_discovery.domain.pantry import PantryIngredient
from recipe_discovery.domain.recipes import MatchedRecipe, RecipeCandidate

STAPLES: tuple[str, ...] = ("water", "salt", "pepper", "sugar")


def normalize_ingredients(items: list[PantryIngredient]) -> list[str]:
    """Return lowercase search terms in order of first appearance."""
    seen: set[str] = set()
    terms: list[str] = []
    for item in items:
        term = item.search_term
        if not term or term in seen:
            continue
        seen.add(term)
        terms.append(term)
    return terms


def expiring_terms(items: list[PantryIngredient], within_days: int) -> set[str]:
    """Return search terms of items that are expired or expire soon."""
    return {
        item.search_term
        for item in items
        if item.search_term
        and (item.is_expired or item.days_until_expiration <= within_days)
    }


def match_terms(terms: list[str], candidate: RecipeCandidate) -> list[str]:
    """Return the pantry and staple terms a candidate consumes.

    A term is used when a structured ``food`` contains it or is contained by
    it; otherwise when any free-text ingredient line contains it.
    """
    foods = [
        ingredient.food.lower()
        for ingredient in candidate.structured_ingredients
        if ingredient.food and ingredient.food.strip()
    ]
    lines = [line.lower() for line in candidate.ingredient_lines]
    candidates = list(terms) + [staple for staple in STAPLES if staple not in terms]
    used: list[str] = []
    for term in candidates:
        if any(term in food or food in term for food in foods):
            used.append(term)
        elif any(term in line for line in lines):
            used.append(term)
    return used


def match_candidate(
    candidate: RecipeCandidate,
    terms: list[str],
    expiring: set[str],
    owner_id: UUID | None = None,
) -> MatchedRecipe:
    """Match a candidate against the current terms and assign it an id."""
    used = match_terms(terms, candidate)
    return MatchedRecipe(
        id=uuid4(),
        label=candidate.label,
        pantry_items_used=tuple(used),
        expiring_items_used=tuple(term for term in used if term in expiring),
        generated_from=tuple(terms),
        source_url=candidate.source_url,
        source_publisher=candidate.source_publisher,
        image=candidate.image,
        servings=candidate.servings,
        total_time_minutes=candidate.total_time_minutes,
        ingredient_lines=candidate.ingredient_lines,
        cuisine_type=candidate.cuisine_type,
        meal_type=candidate.meal_type,
        created_at=datetime.now(tz=UTC),
        owner_id=owner_id,
    )


def refresh_expiring(
    recipes: list[MatchedRecipe], expiring: set[str]
) -> list[MatchedRecipe]:
    """Recompute expiring ingredients against a fresh pantry snapshot."""
    return [
        replace(
            recipe,
            expiring_items_used=tuple(
                term for term in recipe.pantry_items_used if term.lower() in expiring
            ),
        )
        for recipe in recipes
    ]
