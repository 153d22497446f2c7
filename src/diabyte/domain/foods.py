"""Domain models for carbohydrate sources."""

from dataclasses import dataclass
from uuid import UUID

FOOD = "food"
RECIPE = "recipe"
# Display name for a source that was deleted or is not visible to the user.
UNKNOWN_SOURCE_NAME = "(unavailable)"


@dataclass(frozen=True)
class Food:
    """Shared catalog entry with its carbohydrate density."""

    id: UUID
    name: str
    carbs_per_100: float
    unit: str = "g"
    glycemic_index: int | None = None


@dataclass(frozen=True)
class Recipe:
    """Private recipe owned by a single user."""

    id: UUID
    user_id: UUID
    name: str
    carbs_per_100: float | None = None


@dataclass(frozen=True)
class SourceRef:
    """Tagged reference to a food or a recipe."""

    kind: str
    id: UUID


@dataclass(frozen=True)
class MealSource:
    """Resolved view of a source reference."""

    ref: SourceRef
    name: str
    carbs_per_100: float | None
