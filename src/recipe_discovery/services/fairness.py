"""Per-ingredient fairness limiting of recipe recommendations."""

from uuid import UUID

from recipe_discovery.domain.recipes import MatchedRecipe
from recipe_discovery.services.matching import STAPLES

MAX_PER_INGREDIENT = 5

_MODIFIERS = frozenset(
    {
        "fresh",
        "frozen",
        "canned",
        "dried",
        "cooked",
        "raw",
        "organic",
        "plain",
        "greek",
        "whole",
        "skim",
        "low-fat",
        "fat-free",
        "unsweetened",
        "sweetened",
        "vanilla",
        "strawberry",
        "chocolate",
        "extra",
        "virgin",
        "light",
        "heavy",
        "sour",
        "sweet",
        "spicy",
        "mild",
    }
)


def base_ingredient(term: str) -> str:
    """Strip leading and trailing descriptive modifiers from a term.

    ``"fresh organic spinach"`` and ``"spinach"`` share the base ``"spinach"``.
    A term made only of modifiers keeps its last word.
    """
    words = term.lower().split()
    while len(words) > 1 and words[0] in _MODIFIERS:
        words.pop(0)
    while len(words) > 1 and words[-1] in _MODIFIERS:
        words.pop()
    return " ".join(words).strip()


def limit_per_ingredient(
    recipes: list[MatchedRecipe], max_per_ingredient: int = MAX_PER_INGREDIENT
) -> list[MatchedRecipe]:
    """Keep at most ``max_per_ingredient`` recipes per base ingredient.

    A recipe survives when any of its non-staple ingredient groups keeps it.
    Within a group, recipes using expiring items win, then those using more
    pantry items.
    """
    groups: dict[str, list[MatchedRecipe]] = {}
    for recipe in recipes:
        bases = {
            base_ingredient(term)
            for term in recipe.pantry_items_used
            if term.lower() not in STAPLES
        }
        for base in bases:
            groups.setdefault(base, []).append(recipe)

    keep: set[UUID] = set()
    for members in groups.values():
        ranked = sorted(
            members,
            key=lambda recipe: (recipe.uses_expiring, len(recipe.pantry_items_used)),
            reverse=True,
        )
        keep.update(recipe.id for recipe in ranked[:max_per_ingredient])
    return [recipe for recipe in recipes if recipe.id in keep]
