"""Dose calculation and intake ledger endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from diabyte.api.models import (  # noqa: TC001
    CalculateRequest,
    IntakeCreate,
    PostBgUpdate,
)
from diabyte.api.security import current_user_id

if TYPE_CHECKING:
    from diabyte.containers import AppContainer
    from diabyte.domain.dosing import DosingResult
    from diabyte.domain.foods import Food

router = APIRouter(tags=["dosing"])


@router.post("/dosing/calculate")
async def calculate(
    body: CalculateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Estimate carbs and dose without persisting anything."""
    container: AppContainer = request.app.state.container
    food = container.food_catalog.lookup(body.food_id)
    result = container.dosing_service.calculate_for_food(
        user_id, food, body.grams, body.pre_bg
    )
    return _calculation_payload(food, body, result)


@router.post("/dosing/calculate-and-save", status_code=status.HTTP_201_CREATED)
async def calculate_and_save(
    body: CalculateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Calculate and record the outcome in the ledger."""
    container: AppContainer = request.app.state.container
    record = container.intake_service.calculate_and_save(
        user_id, body.food_id, body.grams, body.pre_bg
    )
    return {"intake": record}


@router.post("/intakes", status_code=status.HTTP_201_CREATED)
async def save_intake(
    body: IntakeCreate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Append an intake; carbs are recomputed from the source density."""
    container: AppContainer = request.app.state.container
    record = container.intake_service.save_intake(
        user_id,
        source=body.source,
        source_id=body.source_id,
        grams=body.grams,
        dose_units=body.dose_units,
        pre_bg=body.pre_bg,
        post_bg=body.post_bg,
        carbs_g=body.carbs_g,
    )
    return {"intake": record}


@router.get("/intakes")
async def list_history(
    request: Request,
    limit: int | None = None,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Return the caller's intakes, newest first."""
    container: AppContainer = request.app.state.container
    return {
        "intakes": [
            {**asdict(entry.record), "source_name": entry.source_name}
            for entry in container.intake_service.history(user_id, limit)
        ]
    }


@router.post("/intakes/{record_id}/post-bg")
async def attach_post_bg(
    record_id: UUID,
    body: PostBgUpdate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Attach the post-meal reading to one of the caller's intakes."""
    container: AppContainer = request.app.state.container
    record = container.intake_service.attach_post_bg(record_id, user_id, body.post_bg)
    return {"intake": record}


def _calculation_payload(
    food: Food, body: CalculateRequest, result: DosingResult
) -> dict[str, object]:
    return {
        "food": {
            "id": food.id,
            "name": food.name,
            "unit": food.unit,
            "glycemic_index": food.glycemic_index,
        },
        "input": {"grams": body.grams, "pre_bg": body.pre_bg},
        "result": {
            "carbs_g": result.carbs_g,
            "dose_units": result.dose_units,
            "bolus_component": result.bolus_component,
            "correction_component": result.correction_component,
            "profile_incomplete": result.profile_incomplete,
        },
    }
