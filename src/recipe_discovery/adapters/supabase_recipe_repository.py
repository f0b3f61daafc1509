"""Supabase-backed repository for matched recipes."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from recipe_discovery.domain.errors import StoreError
from recipe_discovery.domain.recipes import MatchedRecipe
from recipe_discovery.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for the ``recipes`` table."""

    client: Client

    def fetch_all(self, owner_id: UUID | None) -> list[MatchedRecipe]:
        """Return stored recipes, newest first."""
        query = self.client.table("recipes").select("*")
        if owner_id is not None:
            query = query.eq("user_id", str(owner_id))
        response = query.order("created_at", desc=True).execute()
        return [_parse_recipe(row) for row in response.data or []]

    def insert_many(self, recipes: list[MatchedRecipe]) -> None:
        """Insert recipe rows in a single request."""
        if not recipes:
            return
        response = (
            self.client.table("recipes")
            .insert([_serialize_recipe(recipe) for recipe in recipes])
            .execute()
        )
        if not response.data:
            raise StoreError("Failed to insert recipes")

    def delete_one(self, recipe_id: UUID) -> None:
        """Delete a recipe row by id."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _serialize_recipe(recipe: MatchedRecipe) -> dict[str, object]:
    return {
        "id": str(recipe.id),
        "user_id": str(recipe.owner_id) if recipe.owner_id else None,
        "label": recipe.label,
        "image": recipe.image,
        "source_url": recipe.source_url,
        "source_publisher": recipe.source_publisher,
        "yield": recipe.servings,
        "total_time": recipe.total_time_minutes,
        "ingredient_lines": list(recipe.ingredient_lines),
        "cuisine_type": list(recipe.cuisine_type) if recipe.cuisine_type else None,
        "meal_type": list(recipe.meal_type) if recipe.meal_type else None,
        "pantry_items_used": list(recipe.pantry_items_used),
        "generated_from": list(recipe.generated_from),
        "created_at": (recipe.created_at or datetime.now(tz=UTC)).isoformat(),
    }


def _parse_recipe(row: dict[str, object]) -> MatchedRecipe:
    """Parse a recipe row into a domain model, tolerating null columns."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return MatchedRecipe(
        id=UUID(str(row["id"])),
        label=str(row.get("label", "")),
        image=row.get("image"),
        source_url=row.get("source_url"),
        source_publisher=row.get("source_publisher"),
        servings=_optional_int(row.get("yield")),
        total_time_minutes=_optional_int(row.get("total_time")),
        ingredient_lines=tuple(row.get("ingredient_lines") or ()),
        cuisine_type=_optional_tuple(row.get("cuisine_type")),
        meal_type=_optional_tuple(row.get("meal_type")),
        pantry_items_used=tuple(row.get("pantry_items_used") or ()),
        generated_from=tuple(row.get("generated_from") or ()),
        created_at=created_at,
        owner_id=UUID(str(row["user_id"])) if row.get("user_id") else None,
    )


def _optional_int(value: object) -> int | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return int(value)
    return None


def _optional_tuple(value: object) -> tuple[str, ...] | None:
    if isinstance(value, list):
        return tuple(str(item) for item in value)
    return None
