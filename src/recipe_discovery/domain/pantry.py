"""Pantry domain models."""

from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel, model_validator

from recipe_discovery.domain.parsing import FlexibleInt


@dataclass(frozen=True)
class PantryIngredient:
    """Read-only snapshot of a pantry item."""

    display_name: str
    days_until_expiration: int
    is_expired: bool = False
    generic_name: str | None = None

    @property
    def search_term(self) -> str:
        """Lowercase matching key, preferring the generic name."""
        return (self.generic_name or self.display_name).strip().lower()


class PantryItemPayload(BaseModel):
    """Pantry item as delivered by the inventory store or an API caller."""

    name: str
    generic_name: str | None = None
    days_until_expiration: FlexibleInt | None = None
    current_expiration_date: datetime | None = None
    is_expired: bool | None = None

    @model_validator(mode="after")
    def _require_expiration(self) -> "PantryItemPayload":
        if self.days_until_expiration is None and self.current_expiration_date is None:
            raise ValueError(
                "days_until_expiration or current_expiration_date is required"
            )
        return self

    def to_ingredient(self, now: datetime | None = None) -> PantryIngredient:
        """Convert the payload into a snapshot relative to ``now``."""
        current = now or datetime.now(tz=UTC)
        expires_at = self.current_expiration_date
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        if self.days_until_expiration is not None:
            days = self.days_until_expiration
        else:
            days = (expires_at.date() - current.date()).days
        if self.is_expired is not None:
            expired = self.is_expired
        elif expires_at is not None:
            expired = expires_at < current
        else:
            expired = days < 0
        generic = self.generic_name.strip() if self.generic_name else None
        return PantryIngredient(
            display_name=self.name,
            generic_name=generic or None,
            days_until_expiration=days,
            is_expired=expired,
        )
