"""Carbohydrate-to-insulin dosing engine."""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from uuid import UUID

from diabyte.domain.dosing import DosingResult
from diabyte.domain.errors import InvalidInput
from diabyte.domain.foods import Food
from diabyte.domain.profiles import PersonalDosingProfile
from diabyte.services.foods import FoodCatalogService
from diabyte.services.profiles import ProfileService

_CENTS = Decimal("0.01")


def round_2(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    try:
        rounded = Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInput("value is out of range", {"value": value}) from None
    return float(rounded)


def compute_carbs_from_density(carbs_per_100: float, grams: float) -> float:
    """Return carbohydrate grams for a portion of a given density."""
    if not math.isfinite(grams) or grams <= 0:
        raise InvalidInput("grams must be greater than zero", {"grams": grams})
    if not math.isfinite(carbs_per_100) or carbs_per_100 < 0:
        raise InvalidInput(
            "carbohydrate density must not be negative",
            {"carbs_per_100": carbs_per_100},
        )
    return round_2(grams * carbs_per_100 / 100)


def compute_carbs(food: Food | None, grams: float) -> float:
    """Return carbohydrate grams for ``grams`` of ``food``."""
    if food is None:
        raise InvalidInput("food is required")
    return compute_carbs_from_density(food.carbs_per_100, grams)


def compute_dose(
    carbs_g: float,
    profile: PersonalDosingProfile | None,
    pre_meal_bg: float | None = None,
) -> DosingResult:
    """Turn a carbohydrate amount into a recommended dose.

    Without a profile or a positive carb ratio no dose is suggested, even when
    a correction alone would be computable. The correction may be negative;
    only the final sum is clamped at zero.
    """
    if not math.isfinite(carbs_g) or carbs_g < 0:
        raise InvalidInput("carbs_g must not be negative", {"carbs_g": carbs_g})
    validate_bg(pre_meal_bg, "pre_bg")
    if profile is None or profile.carb_ratio is None or profile.carb_ratio <= 0:
        return DosingResult(carbs_g=carbs_g)

    bolus = carbs_g / profile.carb_ratio
    correction = None
    if (
        pre_meal_bg is not None
        and profile.correction_factor is not None
        and profile.correction_factor > 0
        and profile.target_bg is not None
    ):
        correction = (pre_meal_bg - profile.target_bg) / profile.correction_factor

    raw_dose = bolus + (correction or 0.0)
    return DosingResult(
        carbs_g=carbs_g,
        dose_units=max(0.0, round_2(raw_dose)),
        bolus_component=bolus,
        correction_component=correction,
    )


@dataclass
class DosingService:
    """Read-only calculation against the catalog and the user's profile."""

    catalog: FoodCatalogService
    profiles: ProfileService

    def calculate(
        self,
        user_id: UUID,
        food_id: UUID,
        grams: float,
        pre_bg: float | None = None,
    ) -> DosingResult:
        """Look up the food and the profile, then compute carbs and dose."""
        food = self.catalog.lookup(food_id)
        return self.calculate_for_food(user_id, food, grams, pre_bg)

    def calculate_for_food(
        self,
        user_id: UUID,
        food: Food,
        grams: float,
        pre_bg: float | None = None,
    ) -> DosingResult:
        """Compute carbs and dose for an already resolved food."""
        carbs_g = compute_carbs(food, grams)
        return compute_dose(carbs_g, self.profiles.get(user_id), pre_bg)


def validate_bg(value: float | None, field: str) -> None:
    """Reject non-finite or non-positive blood glucose readings."""
    if value is not None and (not math.isfinite(value) or value <= 0):
        raise InvalidInput(f"{field} must be greater than zero", {field: value})
