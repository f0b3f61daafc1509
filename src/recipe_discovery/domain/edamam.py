"""Models for Edamam Recipe Search API payloads."""

from pydantic import BaseModel, Field

from recipe_discovery.domain.parsing import FlexibleInt


class EdamamIngredient(BaseModel):
    """Structured ingredient entry of an Edamam recipe."""

    text: str | None = None
    food: str | None = None
    quantity: float | None = None
    weight: float | None = None


class EdamamRecipe(BaseModel):
    """Recipe body of an Edamam hit."""

    uri: str | None = None
    label: str
    image: str | None = None
    source: str | None = None
    url: str | None = None
    recipe_yield: FlexibleInt | None = Field(default=None, alias="yield")
    total_time: FlexibleInt | None = Field(default=None, alias="totalTime")
    ingredient_lines: list[str] | None = Field(default=None, alias="ingredientLines")
    ingredients: list[EdamamIngredient] | None = None
    cuisine_type: list[str] | None = Field(default=None, alias="cuisineType")
    meal_type: list[str] | None = Field(default=None, alias="mealType")


class EdamamHit(BaseModel):
    """Single search hit."""

    recipe: EdamamRecipe


class EdamamSearchResponse(BaseModel):
    """Top-level search response."""

    hits: list[EdamamHit] = Field(default_factory=list)
