"""Personal dosing profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from diabyte.api.models import ProfileUpdate  # noqa: TC001
from diabyte.api.security import current_user_id

if TYPE_CHECKING:
    from diabyte.containers import AppContainer

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the caller's profile; null disables dose suggestions."""
    container: AppContainer = request.app.state.container
    return {"profile": container.profile_service.get(user_id)}


@router.put("")
async def save_profile(
    body: ProfileUpdate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Save the caller's calibration parameters."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.save(
        user_id,
        carb_ratio=body.carb_ratio,
        correction_factor=body.correction_factor,
        target_bg=body.target_bg,
        active_insulin_duration_minutes=body.active_insulin_duration_minutes,
    )
    return {"profile": profile}
