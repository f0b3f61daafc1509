"""Recipe discovery domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


def identity_key(label: str, source_url: str | None) -> str:
    """Return the deduplication key for a recipe."""
    return f"{label.lower()}|{source_url or ''}"


@dataclass(frozen=True)
class StructuredIngredient:
    """Parsed ingredient entry reported by the search provider."""

    food: str | None = None
    text: str | None = None


@dataclass(frozen=True)
class RecipeCandidate:
    """Recipe returned by a search, before pantry matching."""

    label: str
    source_url: str | None = None
    source_publisher: str | None = None
    image: str | None = None
    servings: int | None = None
    total_time_minutes: int | None = None
    ingredient_lines: tuple[str, ...] = ()
    structured_ingredients: tuple[StructuredIngredient, ...] = ()
    cuisine_type: tuple[str, ...] | None = None
    meal_type: tuple[str, ...] | None = None

    @property
    def identity_key(self) -> str:
        return identity_key(self.label, self.source_url)


@dataclass(frozen=True)
class MatchedRecipe:
    """Recipe matched against a pantry snapshot."""

    id: UUID
    label: str
    pantry_items_used: tuple[str, ...]
    generated_from: tuple[str, ...]
    expiring_items_used: tuple[str, ...] = ()
    source_url: str | None = None
    source_publisher: str | None = None
    image: str | None = None
    servings: int | None = None
    total_time_minutes: int | None = None
    ingredient_lines: tuple[str, ...] = ()
    cuisine_type: tuple[str, ...] | None = None
    meal_type: tuple[str, ...] | None = None
    created_at: datetime | None = None
    owner_id: UUID | None = None

    @property
    def identity_key(self) -> str:
        return identity_key(self.label, self.source_url)

    @property
    def missing_count(self) -> int:
        """Ingredient lines not covered by a pantry item or staple."""
        return max(0, len(self.ingredient_lines) - len(self.pantry_items_used))

    @property
    def uses_expiring(self) -> bool:
        return bool(self.expiring_items_used)


@dataclass
class GenerationCacheState:
    """Per-owner cache bookkeeping for remote generations."""

    last_generated_set: frozenset[str] = frozenset()
    initialized: bool = False

    def reset(self) -> None:
        self.last_generated_set = frozenset()
        self.initialized = False


@dataclass(frozen=True)
class RecipeFeed:
    """Ranked recipes published to callers with an optional error message."""

    recipes: list[MatchedRecipe] = field(default_factory=list)
    error_message: str | None = None
