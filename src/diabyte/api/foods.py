"""Catalog endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from diabyte.api.models import FoodCreate  # noqa: TC001
from diabyte.api.security import current_user_id

if TYPE_CHECKING:
    from diabyte.containers import AppContainer

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("", dependencies=[Depends(current_user_id)])
async def search_foods(
    request: Request, q: str | None = None, limit: int = 50
) -> dict[str, object]:
    """Search the catalog by name."""
    container: AppContainer = request.app.state.container
    return {"foods": container.food_catalog.search(q, limit)}


@router.get("/{food_id}", dependencies=[Depends(current_user_id)])
async def get_food(food_id: UUID, request: Request) -> dict[str, object]:
    """Return one catalog food."""
    container: AppContainer = request.app.state.container
    return {"food": container.food_catalog.lookup(food_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_food(
    body: FoodCreate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Add a food, or update the one with the same name."""
    container: AppContainer = request.app.state.container
    food = container.food_catalog.add_food(
        name=body.name,
        carbs_per_100=body.carbs_per_100,
        unit=body.unit,
        glycemic_index=body.glycemic_index,
        created_by=user_id,
    )
    return {"food": food}


@router.delete("/{food_id}", dependencies=[Depends(current_user_id)])
async def delete_food(food_id: UUID, request: Request) -> dict[str, str]:
    """Remove a food from the catalog."""
    container: AppContainer = request.app.state.container
    container.food_catalog.delete_food(food_id)
    return {"status": "ok"}


@router.post(
    "/import/{fdc_id}",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(current_user_id)],
)
async def import_food(fdc_id: int, request: Request) -> dict[str, object]:
    """Import a food from USDA FoodData Central."""
    container: AppContainer = request.app.state.container
    food = await container.food_import_service.import_food(fdc_id)
    return {"food": food}
