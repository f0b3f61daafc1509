"""Filtering and ordering of matched recipes."""

from recipe_discovery.domain.recipes import MatchedRecipe

MAX_MISSING = 3
MAX_RESULTS = 15


def rank_recipes(
    recipes: list[MatchedRecipe],
    max_missing: int = MAX_MISSING,
    max_results: int = MAX_RESULTS,
) -> list[MatchedRecipe]:
    """Drop recipes missing too much, then order by urgency and coverage."""
    eligible = [recipe for recipe in recipes if recipe.missing_count <= max_missing]
    ordered = sorted(
        eligible,
        key=lambda recipe: (
            not recipe.uses_expiring,
            recipe.missing_count,
            -len(recipe.pantry_items_used),
        ),
    )
    return ordered[:max_results]
