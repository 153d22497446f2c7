"""Request bodies accepted by the HTTP layer."""

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

MAX_PORTION_GRAMS = 100000.0

Grams = Annotated[float, Field(le=MAX_PORTION_GRAMS)]


class RequestBody(BaseModel):
    """Base for request bodies; JSON NaN and Infinity are rejected."""

    model_config = ConfigDict(allow_inf_nan=False)


class FoodCreate(RequestBody):
    """New or updated catalog food."""

    name: str
    carbs_per_100: float
    unit: str = "g"
    glycemic_index: int | None = None


class ProfileUpdate(RequestBody):
    """Complete set of calibration parameters."""

    carb_ratio: float
    correction_factor: float
    target_bg: float
    active_insulin_duration_minutes: int


class CalculateRequest(RequestBody):
    """Food portion with an optional pre-meal reading."""

    food_id: UUID
    grams: Grams
    pre_bg: float | None = None


class IntakeCreate(RequestBody):
    """Intake to append to the ledger."""

    source: str = "food"
    source_id: UUID
    grams: Grams
    dose_units: float | None = None
    pre_bg: float | None = None
    post_bg: float | None = None
    carbs_g: float | None = None


class PostBgUpdate(RequestBody):
    """Post-meal blood glucose reading."""

    post_bg: float


class MealItemCreate(RequestBody):
    """Portion to add to a meal block."""

    block: str
    source: str
    source_id: UUID
    grams: Grams


class MealItemUpdate(RequestBody):
    """New portion size for a meal item."""

    grams: Grams
