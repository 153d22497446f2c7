"""Daily meal plans grouped into time-of-day blocks."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from diabyte.domain.errors import Forbidden, InvalidInput, NotFound
from diabyte.domain.foods import UNKNOWN_SOURCE_NAME, SourceRef
from diabyte.domain.meal_plans import (
    MEAL_BLOCKS,
    BlockTotals,
    ItemCarbs,
    MealItem,
    MealPlan,
    PlanView,
)
from diabyte.services.dosing import compute_carbs_from_density, round_2
from diabyte.services.sources import SourceResolver

DEFAULT_MAX_ITEM_GRAMS = 100000.0

_logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans and their items."""

    def get_or_create_plan(self, user_id: UUID, plan_date: date) -> MealPlan:
        """Atomically return the plan for (user, date), creating it if needed."""

    def get_plan(self, user_id: UUID, plan_date: date) -> MealPlan | None:
        """Return the plan for (user, date), if present."""

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a plan together with its items."""

    def list_items(self, plan_id: UUID) -> list[MealItem]:
        """Return the plan's items in insertion order."""

    def create_item(
        self, plan_id: UUID, block: str, source: SourceRef, grams: float
    ) -> MealItem:
        """Insert an item into a plan."""

    def update_item_grams(
        self, plan_id: UUID, item_id: UUID, grams: float
    ) -> MealItem | None:
        """Update grams of an item only if it belongs to the plan."""

    def delete_item(self, plan_id: UUID, item_id: UUID) -> bool:
        """Delete an item only if it belongs to the plan."""

    def item_exists(self, item_id: UUID) -> bool:
        """Return True when an item with this id exists in any plan."""


@dataclass
class MealPlanService:
    """Builds plans, mutates their items and aggregates carbohydrates."""

    repository: MealPlanRepository
    sources: SourceResolver
    max_item_grams: float = DEFAULT_MAX_ITEM_GRAMS

    def get_or_create(self, user_id: UUID, plan_date: date) -> MealPlan:
        """Return the user's plan for the date; repeated calls return the same plan."""
        return self.repository.get_or_create_plan(user_id, plan_date)

    def add_item(  # noqa: PLR0913
        self,
        plan: MealPlan,
        block: str,
        source: str,
        source_id: UUID,
        grams: float,
    ) -> MealItem:
        """Validate and add a food or recipe portion to a block."""
        _validate_block(block)
        ref = self.sources.ref(source, source_id)
        self._validate_grams(grams)
        self.sources.resolve(plan.user_id, ref)
        return self._create_item(plan, block, ref, grams)

    def upsert_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        plan_date: date,
        block: str,
        source: str,
        source_id: UUID,
        grams: float,
    ) -> MealItem:
        """Add an item to the user's plan for the date.

        Everything is validated and the source resolved before the plan is
        created, so a rejected item never leaves an empty plan behind.
        """
        _validate_block(block)
        ref = self.sources.ref(source, source_id)
        self._validate_grams(grams)
        self.sources.resolve(user_id, ref)
        plan = self.get_or_create(user_id, plan_date)
        return self._create_item(plan, block, ref, grams)

    def update_item_grams(
        self, plan: MealPlan, item_id: UUID, grams: float
    ) -> MealItem:
        """Change an item's portion; the item must belong to the plan."""
        self._validate_grams(grams)
        item = self.repository.update_item_grams(plan.id, item_id, grams)
        if item is None:
            raise self._missing_item(plan.id, item_id)
        _logger.info("Meal item updated: plan_id=%s item_id=%s", plan.id, item_id)
        return item

    def remove_item(self, plan: MealPlan, item_id: UUID) -> None:
        """Delete an item; the item must belong to the plan."""
        if not self.repository.delete_item(plan.id, item_id):
            raise self._missing_item(plan.id, item_id)
        _logger.info("Meal item removed: plan_id=%s item_id=%s", plan.id, item_id)

    def update_plan_item(
        self, user_id: UUID, plan_date: date, item_id: UUID, grams: float
    ) -> MealItem:
        """Change an item in the dated plan; a missing plan is never created."""
        self._validate_grams(grams)
        plan = self.repository.get_plan(user_id, plan_date)
        if plan is None:
            raise self._missing_item(None, item_id)
        return self.update_item_grams(plan, item_id, grams)

    def remove_plan_item(self, user_id: UUID, plan_date: date, item_id: UUID) -> None:
        """Remove an item from the dated plan; a missing plan is never created."""
        plan = self.repository.get_plan(user_id, plan_date)
        if plan is None:
            raise self._missing_item(None, item_id)
        self.remove_item(plan, item_id)

    def delete_plan(self, user_id: UUID, plan_date: date) -> None:
        """Delete the user's plan for the date and all of its items."""
        plan = self.repository.get_plan(user_id, plan_date)
        if plan is None:
            raise NotFound("meal plan not found", {"date": plan_date.isoformat()})
        self.repository.delete_plan(plan.id)
        _logger.info("Meal plan deleted: plan_id=%s", plan.id)

    def total_carbs(self, plan: MealPlan, block: str) -> BlockTotals:
        """Return carbohydrate totals for one block of the plan."""
        _validate_block(block)
        items = [
            item for item in self.repository.list_items(plan.id) if item.block == block
        ]
        return self._block_totals(plan, block, items)

    def get_plan_view(self, user_id: UUID, plan_date: date) -> PlanView:
        """Return the plan with every block in fixed order and a day total."""
        plan = self.get_or_create(user_id, plan_date)
        grouped: dict[str, list[MealItem]] = {block: [] for block in MEAL_BLOCKS}
        for item in self.repository.list_items(plan.id):
            grouped.setdefault(item.block, []).append(item)
        blocks = [
            self._block_totals(plan, block, grouped[block]) for block in MEAL_BLOCKS
        ]
        return PlanView(
            plan=plan,
            blocks=blocks,
            total_carbs_g=round_2(sum(block.total_carbs_g for block in blocks)),
            excluded_count=sum(block.excluded_count for block in blocks),
        )

    def item_carbs(self, plan: MealPlan, item: MealItem) -> ItemCarbs:
        """Return an item's carbs, or None when its density is unknown."""
        source = self.sources.find(plan.user_id, item.source)
        if source is None:
            return ItemCarbs(item=item, name=UNKNOWN_SOURCE_NAME, carbs_g=None)
        if source.carbs_per_100 is None:
            return ItemCarbs(item=item, name=source.name, carbs_g=None)
        return ItemCarbs(
            item=item,
            name=source.name,
            carbs_g=compute_carbs_from_density(source.carbs_per_100, item.grams),
        )

    def _block_totals(
        self, plan: MealPlan, block: str, items: list[MealItem]
    ) -> BlockTotals:
        entries = [self.item_carbs(plan, item) for item in items]
        known = [entry.carbs_g for entry in entries if entry.carbs_g is not None]
        return BlockTotals(
            block=block,
            items=entries,
            total_carbs_g=round_2(sum(known)),
            excluded_count=len(entries) - len(known),
        )

    def _create_item(
        self, plan: MealPlan, block: str, ref: SourceRef, grams: float
    ) -> MealItem:
        item = self.repository.create_item(plan.id, block, ref, grams)
        _logger.info("Meal item added: plan_id=%s item_id=%s", plan.id, item.id)
        return item

    def _validate_grams(self, grams: float) -> None:
        if not 0 < grams <= self.max_item_grams:
            raise InvalidInput(
                f"grams must be greater than 0 and at most {self.max_item_grams:g}",
                {"grams": grams},
            )

    def _missing_item(self, plan_id: UUID | None, item_id: UUID) -> Exception:
        if self.repository.item_exists(item_id):
            _logger.warning(
                "Rejected access to meal item: plan_id=%s item_id=%s",
                plan_id,
                item_id,
            )
            return Forbidden("meal item does not belong to this plan")
        return NotFound("meal item not found", {"item_id": str(item_id)})


def _validate_block(block: str) -> None:
    if block not in MEAL_BLOCKS:
        raise InvalidInput(
            "block must be one of: " + ", ".join(MEAL_BLOCKS), {"block": block}
        )
