"""Tests for the dosing engine."""

from uuid import uuid4

import pytest

from diabyte.domain.errors import InvalidInput, NotFound
from diabyte.domain.foods import Food
from diabyte.domain.profiles import PersonalDosingProfile
from diabyte.services.dosing import compute_carbs, compute_dose, round_2
from tests.conftest import build_services


def _profile(carb_ratio: float | None = 10, correction_factor: float | None = 50):
    return PersonalDosingProfile(
        user_id=uuid4(),
        carb_ratio=carb_ratio,
        correction_factor=correction_factor,
        target_bg=100,
        active_insulin_duration_minutes=240,
    )


def test_compute_carbs_scales_density_by_portion() -> None:
    food = Food(id=uuid4(), name="Arroz cocido", carbs_per_100=60)

    assert compute_carbs(food, 150) == 90.0


def test_compute_carbs_rounds_half_away_from_zero() -> None:
    food = Food(id=uuid4(), name="Caldo", carbs_per_100=12.5)

    assert compute_carbs(food, 1) == 0.13
    assert round_2(2.675) == 2.68
    assert round_2(-0.125) == -0.13


def test_compute_carbs_is_linear_and_monotonic_in_grams() -> None:
    food = Food(id=uuid4(), name="Pan", carbs_per_100=48)

    small = compute_carbs(food, 50)
    large = compute_carbs(food, 100)

    assert large == pytest.approx(small * 2)
    assert compute_carbs(food, 101) > large


def test_compute_carbs_rejects_missing_food_and_bad_grams() -> None:
    food = Food(id=uuid4(), name="Pan", carbs_per_100=48)

    with pytest.raises(InvalidInput):
        compute_carbs(None, 100)
    with pytest.raises(InvalidInput):
        compute_carbs(food, 0)
    with pytest.raises(InvalidInput):
        compute_carbs(food, -5)


def test_compute_dose_adds_positive_correction() -> None:
    result = compute_dose(90, _profile(), pre_meal_bg=180)

    assert result.bolus_component == pytest.approx(9.0)
    assert result.correction_component == pytest.approx(1.6)
    assert result.dose_units == 10.6
    assert not result.profile_incomplete


def test_compute_dose_keeps_negative_correction() -> None:
    result = compute_dose(90, _profile(), pre_meal_bg=60)

    assert result.correction_component == pytest.approx(-0.8)
    assert result.dose_units == 8.2


def test_compute_dose_clamps_final_sum_at_zero() -> None:
    result = compute_dose(10, _profile(carb_ratio=50), pre_meal_bg=40)

    assert result.bolus_component == pytest.approx(0.2)
    assert result.correction_component == pytest.approx(-1.2)
    assert result.dose_units == 0.0


def test_compute_dose_without_pre_bg_is_bolus_only() -> None:
    result = compute_dose(45, _profile(), pre_meal_bg=None)

    assert result.correction_component is None
    assert result.dose_units == 4.5


def test_compute_dose_skips_correction_without_factor() -> None:
    result = compute_dose(45, _profile(correction_factor=None), pre_meal_bg=250)

    assert result.correction_component is None
    assert result.dose_units == 4.5


def test_compute_dose_without_ratio_suggests_nothing() -> None:
    no_profile = compute_dose(30, None, pre_meal_bg=200)
    no_ratio = compute_dose(30, _profile(carb_ratio=None), pre_meal_bg=200)

    for result in (no_profile, no_ratio):
        assert result.carbs_g == 30
        assert result.dose_units is None
        assert result.bolus_component is None
        assert result.correction_component is None
        assert result.profile_incomplete


def test_dosing_service_calculates_with_saved_profile() -> None:
    services = build_services()
    user_id = uuid4()
    food = services.foods.add("Arroz cocido", 60)
    services.profile_service.save(user_id, 10, 50, 100, 240)

    result = services.dosing.calculate(user_id, food.id, 150, pre_bg=180)

    assert result.carbs_g == 90.0
    assert result.dose_units == 10.6


def test_dosing_service_without_profile_returns_carbs_only() -> None:
    services = build_services()
    food = services.foods.add("Arroz cocido", 60)

    result = services.dosing.calculate(uuid4(), food.id, 150)

    assert result.carbs_g == 90.0
    assert result.dose_units is None


def test_dosing_service_reads_current_catalog_values() -> None:
    services = build_services()
    user_id = uuid4()
    food = services.foods.add("Avena", 60)
    first = services.dosing.calculate(user_id, food.id, 100)

    services.catalog.add_food("Avena", 66)
    second = services.dosing.calculate(user_id, food.id, 100)

    assert first.carbs_g == 60.0
    assert second.carbs_g == 66.0


def test_dosing_service_rejects_unknown_food_and_bad_bg() -> None:
    services = build_services()
    food = services.foods.add("Pan", 48)

    with pytest.raises(NotFound):
        services.dosing.calculate(uuid4(), uuid4(), 100)
    with pytest.raises(InvalidInput):
        services.dosing.calculate(uuid4(), food.id, 100, pre_bg=0)
    with pytest.raises(InvalidInput):
        services.dosing.calculate(uuid4(), food.id, 0)


def test_compute_dose_rejects_non_finite_readings() -> None:
    with pytest.raises(InvalidInput):
        compute_dose(90, _profile(), pre_meal_bg=float("nan"))
    with pytest.raises(InvalidInput):
        compute_dose(90, _profile(), pre_meal_bg=float("inf"))
    with pytest.raises(InvalidInput):
        compute_dose(float("nan"), _profile())


def test_compute_carbs_rejects_non_finite_and_oversized_portions() -> None:
    food = Food(id=uuid4(), name="Pan", carbs_per_100=48)

    with pytest.raises(InvalidInput):
        compute_carbs(food, float("nan"))
    with pytest.raises(InvalidInput):
        compute_carbs(food, float("inf"))
    with pytest.raises(InvalidInput):
        compute_carbs(food, 1e30)


def test_round_2_rejects_values_beyond_decimal_precision() -> None:
    with pytest.raises(InvalidInput) as excinfo:
        round_2(1e30)

    assert excinfo.value.to_dict()["details"] == {"value": 1e30}


def test_error_details_render_non_finite_values_as_text() -> None:
    error = InvalidInput("bad reading", {"pre_bg": float("nan"), "grams": 10})

    assert error.to_dict()["details"] == {"pre_bg": "nan", "grams": 10}
