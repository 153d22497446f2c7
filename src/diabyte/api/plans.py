"""Meal plan endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from diabyte.api.models import MealItemCreate, MealItemUpdate  # noqa: TC001
from diabyte.api.security import current_user_id

if TYPE_CHECKING:
    from diabyte.containers import AppContainer
    from diabyte.domain.meal_plans import BlockTotals, PlanView

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("/{plan_date}")
async def get_plan(
    plan_date: date,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Return the day's plan, creating an empty one on first access."""
    container: AppContainer = request.app.state.container
    view = container.meal_plan_service.get_plan_view(user_id, plan_date)
    return _plan_payload(view)


@router.delete("/{plan_date}")
async def delete_plan(
    plan_date: date,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, str]:
    """Delete the day's plan and every item in it."""
    container: AppContainer = request.app.state.container
    container.meal_plan_service.delete_plan(user_id, plan_date)
    return {"status": "ok"}


@router.post("/{plan_date}/items", status_code=status.HTTP_201_CREATED)
async def add_item(
    plan_date: date,
    body: MealItemCreate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Add a food or recipe portion to one of the day's blocks."""
    container: AppContainer = request.app.state.container
    item = container.meal_plan_service.upsert_item(
        user_id,
        plan_date,
        block=body.block,
        source=body.source,
        source_id=body.source_id,
        grams=body.grams,
    )
    return {"item": item}


@router.patch("/{plan_date}/items/{item_id}")
async def update_item(
    plan_date: date,
    item_id: UUID,
    body: MealItemUpdate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Change the grams of an item in the caller's plan."""
    container: AppContainer = request.app.state.container
    item = container.meal_plan_service.update_plan_item(
        user_id, plan_date, item_id, body.grams
    )
    return {"item": item}


@router.delete("/{plan_date}/items/{item_id}")
async def remove_item(
    plan_date: date,
    item_id: UUID,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, str]:
    """Remove an item from the caller's plan."""
    container: AppContainer = request.app.state.container
    container.meal_plan_service.remove_plan_item(user_id, plan_date, item_id)
    return {"status": "ok"}


def _block_payload(block: BlockTotals) -> dict[str, object]:
    return {
        "block": block.block,
        "items": [
            {
                "id": entry.item.id,
                "source": entry.item.source.kind,
                "source_id": entry.item.source.id,
                "name": entry.name,
                "grams": entry.item.grams,
                "carbs_g": entry.carbs_g,
            }
            for entry in block.items
        ],
        "total_carbs_g": block.total_carbs_g,
        "excluded_count": block.excluded_count,
        "complete": block.complete,
    }


def _plan_payload(view: PlanView) -> dict[str, object]:
    return {
        "plan": view.plan,
        "blocks": [_block_payload(block) for block in view.blocks],
        "total_carbs_g": view.total_carbs_g,
        "excluded_count": view.excluded_count,
        "complete": view.complete,
    }
