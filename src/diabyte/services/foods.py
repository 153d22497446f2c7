"""Shared food catalog."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diabyte.domain.errors import InvalidInput, NotFound
from diabyte.domain.foods import Food

MAX_SEARCH_LIMIT = 500
MAX_GLYCEMIC_INDEX = 120
MAX_CARBS_PER_100 = 100.0
MAX_UNIT_LENGTH = 10

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Persistence interface for catalog foods."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""

    def search_foods(self, query: str, limit: int) -> list[Food]:
        """Return foods whose name contains the query, ordered by name."""

    def list_foods(self, limit: int) -> list[Food]:
        """Return foods ordered by name."""

    def upsert_food(self, payload: dict[str, object]) -> Food:
        """Insert a food or update the one with the same name."""

    def delete_food(self, food_id: UUID) -> bool:
        """Delete a food and return True when a row was removed."""


@dataclass
class FoodCatalogService:
    """Read access to the catalog plus its small maintenance surface."""

    repository: FoodRepository

    def lookup(self, food_id: UUID) -> Food:
        """Return the food or raise NotFound."""
        food = self.repository.get_food(food_id)
        if food is None:
            raise NotFound("food not found", {"food_id": str(food_id)})
        return food

    def search(self, query: str | None, limit: int = 50) -> list[Food]:
        """Search by name, listing the whole catalog when the query is empty."""
        bounded = min(max(limit, 1), MAX_SEARCH_LIMIT)
        cleaned = _clean(query or "")
        if not cleaned:
            return self.repository.list_foods(bounded)
        return self.repository.search_foods(cleaned, bounded)

    def add_food(
        self,
        name: str,
        carbs_per_100: float,
        unit: str = "g",
        glycemic_index: int | None = None,
        created_by: UUID | None = None,
    ) -> Food:
        """Validate and upsert a catalog food keyed by its name."""
        cleaned_name = _clean(name)
        cleaned_unit = _clean(unit)
        errors: dict[str, object] = {}
        if not cleaned_name:
            errors["name"] = "required"
        if not 0 <= carbs_per_100 <= MAX_CARBS_PER_100:
            errors["carbs_per_100"] = "must be between 0 and 100"
        if glycemic_index is not None and not (
            0 <= glycemic_index <= MAX_GLYCEMIC_INDEX
        ):
            errors["glycemic_index"] = "must be between 0 and 120"
        if not cleaned_unit or len(cleaned_unit) > MAX_UNIT_LENGTH:
            errors["unit"] = "must be 1 to 10 characters"
        if errors:
            raise InvalidInput("invalid food", errors)

        food = self.repository.upsert_food(
            {
                "name": cleaned_name,
                "carbs_per_100": carbs_per_100,
                "unit": cleaned_unit,
                "glycemic_index": glycemic_index,
                "created_by": str(created_by) if created_by else None,
            }
        )
        _logger.info("Catalog food saved: food_id=%s", food.id)
        return food

    def delete_food(self, food_id: UUID) -> None:
        """Remove a food from the catalog; past ledger entries are unaffected."""
        if not self.repository.delete_food(food_id):
            raise NotFound("food not found", {"food_id": str(food_id)})
        _logger.info("Catalog food deleted: food_id=%s", food_id)


def _clean(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()
