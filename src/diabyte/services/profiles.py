"""Personal dosing profile service."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diabyte.domain.errors import InvalidInput
from diabyte.domain.profiles import PersonalDosingProfile

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for dosing profiles."""

    def get_profile(self, user_id: UUID) -> PersonalDosingProfile | None:
        """Return the user's profile, if one exists."""

    def upsert_profile(self, profile: PersonalDosingProfile) -> PersonalDosingProfile:
        """Create or replace the user's profile."""


@dataclass
class ProfileService:
    """Service for reading and saving calibration parameters."""

    repository: ProfileRepository

    def get(self, user_id: UUID) -> PersonalDosingProfile | None:
        """Return the profile; None means dosing suggestions are disabled."""
        return self.repository.get_profile(user_id)

    def save(
        self,
        user_id: UUID,
        carb_ratio: float,
        correction_factor: float,
        target_bg: float,
        active_insulin_duration_minutes: int,
    ) -> PersonalDosingProfile:
        """Validate and persist a complete profile."""
        values = {
            "carb_ratio": carb_ratio,
            "correction_factor": correction_factor,
            "target_bg": target_bg,
            "active_insulin_duration_minutes": active_insulin_duration_minutes,
        }
        invalid = {
            name: value
            for name, value in values.items()
            if not math.isfinite(value) or value <= 0
        }
        if invalid:
            raise InvalidInput("profile values must be greater than zero", invalid)

        profile = self.repository.upsert_profile(
            PersonalDosingProfile(user_id=user_id, **values)
        )
        _logger.info("Dosing profile saved: user_id=%s", user_id)
        return profile
