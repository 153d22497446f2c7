"""Domain models for daily meal plans."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from diabyte.domain.foods import SourceRef

MEAL_BLOCKS = ("breakfast", "lunch", "dinner", "snack")


@dataclass(frozen=True)
class MealPlan:
    """One plan per user and calendar date."""

    id: UUID
    user_id: UUID
    plan_date: date


@dataclass(frozen=True)
class MealItem:
    """Planned portion of a food or recipe within a block."""

    id: UUID
    meal_plan_id: UUID
    block: str
    source: SourceRef
    grams: float


@dataclass(frozen=True)
class ItemCarbs:
    """Meal item with its carbohydrate estimate, if the density is known."""

    item: MealItem
    name: str
    carbs_g: float | None


@dataclass(frozen=True)
class BlockTotals:
    """Carbohydrate totals for one meal block.

    ``total_carbs_g`` sums only items with a known value; ``excluded_count``
    says how many were left out.
    """

    block: str
    items: list[ItemCarbs]
    total_carbs_g: float
    excluded_count: int

    @property
    def complete(self) -> bool:
        """True when every item contributed to the total."""
        return self.excluded_count == 0


@dataclass(frozen=True)
class PlanView:
    """A plan with all four blocks in fixed order."""

    plan: MealPlan
    blocks: list[BlockTotals]
    total_carbs_g: float
    excluded_count: int

    @property
    def complete(self) -> bool:
        """True when no item of the day was excluded from the total."""
        return self.excluded_count == 0
