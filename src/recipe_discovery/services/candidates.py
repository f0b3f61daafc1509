"""Conversion of raw search hits into deduplicated recipe candidates."""

from recipe_discovery.domain.edamam import EdamamHit
from recipe_discovery.domain.recipes import RecipeCandidate, StructuredIngredient


def build_candidates(hits: list[EdamamHit]) -> list[RecipeCandidate]:
    """Map hits to candidates, keeping the first hit seen per identity key.

    Which duplicate survives depends on the order hits are passed in.
    """
    seen: set[str] = set()
    candidates: list[RecipeCandidate] = []
    for hit in hits:
        candidate = _to_candidate(hit)
        if candidate.identity_key in seen:
            continue
        seen.add(candidate.identity_key)
        candidates.append(candidate)
    return candidates


def _to_candidate(hit: EdamamHit) -> RecipeCandidate:
    recipe = hit.recipe
    return RecipeCandidate(
        label=recipe.label,
        source_url=recipe.url,
        source_publisher=recipe.source,
        image=recipe.image,
        servings=recipe.recipe_yield,
        total_time_minutes=recipe.total_time,
        ingredient_lines=tuple(recipe.ingredient_lines or ()),
        structured_ingredients=tuple(
            StructuredIngredient(food=ingredient.food, text=ingredient.text)
            for ingredient in recipe.ingredients or ()
        ),
        cuisine_type=tuple(recipe.cuisine_type) if recipe.cuisine_type else None,
        meal_type=tuple(recipe.meal_type) if recipe.meal_type else None,
    )
