"""Supabase-backed reader for pantry inventory snapshots."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from pydantic import ValidationError
from supabase import Client

from recipe_discovery.domain.pantry import PantryIngredient, PantryItemPayload
from recipe_discovery.services.recipes import PantryRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabasePantryRepository(PantryRepository):
    """Reads the ``pantry_items`` table owned by the inventory app."""

    client: Client

    def current_items(self, owner_id: UUID | None) -> list[PantryIngredient]:
        """Return the owner's pantry, soonest expiring first."""
        query = self.client.table("pantry_items").select(
            "name, generic_name, current_expiration_date"
        )
        if owner_id is not None:
            query = query.eq("user_id", str(owner_id))
        response = query.order("current_expiration_date").execute()
        now = datetime.now(tz=UTC)
        items: list[PantryIngredient] = []
        for row in response.data or []:
            try:
                payload = PantryItemPayload.model_validate(row)
            except ValidationError:
                _logger.warning("Skipping malformed pantry row: %s", row.get("name"))
                continue
            items.append(payload.to_ingredient(now))
        return items
