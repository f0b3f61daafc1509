"""Pydantic models for recipe API payloads."""

from typing import Literal

from pydantic import BaseModel, Field

from recipe_discovery.domain.pantry import PantryIngredient, PantryItemPayload


class PantrySnapshot(BaseModel):
    """Pantry items sent by a caller."""

    items: list[PantryItemPayload] = Field(default_factory=list)

    def to_ingredients(self) -> list[PantryIngredient]:
        """Convert payload items into pantry snapshots."""
        return [item.to_ingredient() for item in self.items]


class PantryEvent(BaseModel):
    """Change notification fired by the pantry inventory."""

    event: Literal["added", "removed"]
