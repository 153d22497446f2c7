"""Personal dosing calibration."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class PersonalDosingProfile:
    """Per-user parameters; every field may be missing at the data layer."""

    user_id: UUID
    carb_ratio: float | None = None
    correction_factor: float | None = None
    target_bg: float | None = None
    active_insulin_duration_minutes: int | None = None
