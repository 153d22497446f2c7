"""Supabase repository for meal plans and plan items."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from diabyte.domain.foods import SourceRef
from diabyte.domain.meal_plans import MealItem, MealPlan
from diabyte.services.meal_plans import MealPlanRepository

_ITEM_COLUMNS = "id, meal_plan_id, block, source_type, source_id, grams"


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans.

    ``meal_plans`` carries a unique key on (user_id, plan_date) and
    ``meal_plan_items.meal_plan_id`` cascades on delete.
    """

    client: Client

    def get_or_create_plan(self, user_id: UUID, plan_date: date) -> MealPlan:
        """Insert-ignore on the unique key, then fetch the surviving row."""
        self.client.table("meal_plans").upsert(
            {"user_id": str(user_id), "plan_date": plan_date.isoformat()},
            on_conflict="user_id,plan_date",
            ignore_duplicates=True,
        ).execute()
        plan = self.get_plan(user_id, plan_date)
        if plan is None:
            raise RuntimeError("Failed to create meal plan")
        return plan

    def get_plan(self, user_id: UUID, plan_date: date) -> MealPlan | None:
        """Return the plan for a user and date."""
        response = (
            self.client.table("meal_plans")
            .select("id, user_id, plan_date")
            .eq("user_id", str(user_id))
            .eq("plan_date", plan_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return MealPlan(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            plan_date=date.fromisoformat(str(row["plan_date"])),
        )

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a plan; items go with it through the cascade."""
        self.client.table("meal_plans").delete().eq("id", str(plan_id)).execute()

    def list_items(self, plan_id: UUID) -> list[MealItem]:
        """Return plan items in insertion order."""
        response = (
            self.client.table("meal_plan_items")
            .select(_ITEM_COLUMNS)
            .eq("meal_plan_id", str(plan_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def create_item(
        self, plan_id: UUID, block: str, source: SourceRef, grams: float
    ) -> MealItem:
        """Insert a plan item."""
        response = (
            self.client.table("meal_plan_items")
            .insert(
                {
                    "meal_plan_id": str(plan_id),
                    "block": block,
                    "source_type": source.kind,
                    "source_id": str(source.id),
                    "grams": grams,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan item")
        return _parse_item(response.data[0])

    def update_item_grams(
        self, plan_id: UUID, item_id: UUID, grams: float
    ) -> MealItem | None:
        """Update grams with the ownership filter in the same statement."""
        response = (
            self.client.table("meal_plan_items")
            .update({"grams": grams})
            .eq("id", str(item_id))
            .eq("meal_plan_id", str(plan_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete_item(self, plan_id: UUID, item_id: UUID) -> bool:
        """Delete an item with the ownership filter in the same statement."""
        response = (
            self.client.table("meal_plan_items")
            .delete()
            .eq("id", str(item_id))
            .eq("meal_plan_id", str(plan_id))
            .execute()
        )
        return bool(response.data)

    def item_exists(self, item_id: UUID) -> bool:
        """Return True when the item exists in any plan."""
        response = (
            self.client.table("meal_plan_items")
            .select("id")
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        return bool(response.data)


def _parse_item(row: dict[str, object]) -> MealItem:
    return MealItem(
        id=UUID(row["id"]),
        meal_plan_id=UUID(row["meal_plan_id"]),
        block=str(row["block"]),
        source=SourceRef(kind=str(row["source_type"]), id=UUID(row["source_id"])),
        grams=float(row.get("grams", 0.0)),
    )
