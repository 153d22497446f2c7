"""Supabase implementation for the shared food catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diabyte.domain.foods import Food
from diabyte.services.foods import FoodRepository

_FOOD_COLUMNS = "id, name, carbs_per_100, unit, glycemic_index"


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed repository for catalog foods."""

    client: Client

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        response = (
            self.client.table("foods")
            .select(_FOOD_COLUMNS)
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def search_foods(self, query: str, limit: int) -> list[Food]:
        """Search foods by name."""
        response = (
            self.client.table("foods")
            .select(_FOOD_COLUMNS)
            .ilike("name", f"%{query}%")
            .order("name", desc=False)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_foods(self, limit: int) -> list[Food]:
        """Return foods ordered by name."""
        response = (
            self.client.table("foods")
            .select(_FOOD_COLUMNS)
            .order("name", desc=False)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def upsert_food(self, payload: dict[str, object]) -> Food:
        """Insert a food or update the existing one with the same name."""
        response = (
            self.client.table("foods").upsert(payload, on_conflict="name").execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save food")
        return _parse_food(response.data[0])

    def delete_food(self, food_id: UUID) -> bool:
        """Delete a food row."""
        response = self.client.table("foods").delete().eq("id", str(food_id)).execute()
        return bool(response.data)


def _parse_food(row: dict[str, object]) -> Food:
    glycemic_index = row.get("glycemic_index")
    return Food(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        carbs_per_100=float(row.get("carbs_per_100", 0.0)),
        unit=str(row.get("unit") or "g"),
        glycemic_index=int(glycemic_index) if glycemic_index is not None else None,
    )
