"""Supabase repository for personal dosing profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from diabyte.domain.profiles import PersonalDosingProfile
from diabyte.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "user_id, carb_ratio, correction_factor, target_bg, "
    "active_insulin_duration_minutes"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for dosing profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> PersonalDosingProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("dosing_profiles")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(self, profile: PersonalDosingProfile) -> PersonalDosingProfile:
        """Create or replace the user's profile row."""
        response = (
            self.client.table("dosing_profiles")
            .upsert(
                {
                    "user_id": str(profile.user_id),
                    "carb_ratio": profile.carb_ratio,
                    "correction_factor": profile.correction_factor,
                    "target_bg": profile.target_bg,
                    "active_insulin_duration_minutes": (
                        profile.active_insulin_duration_minutes
                    ),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save dosing profile")
        return _parse_profile(response.data[0])


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None


def _parse_profile(row: dict[str, object]) -> PersonalDosingProfile:
    duration = row.get("active_insulin_duration_minutes")
    return PersonalDosingProfile(
        user_id=UUID(row["user_id"]),
        carb_ratio=_optional_float(row.get("carb_ratio")),
        correction_factor=_optional_float(row.get("correction_factor")),
        target_bg=_optional_float(row.get("target_bg")),
        active_insulin_duration_minutes=int(duration) if duration is not None else None,
    )
