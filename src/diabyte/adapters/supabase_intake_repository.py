"""Supabase repository for the intake ledger."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from diabyte.domain.foods import SourceRef
from diabyte.domain.intake import IntakeRecord
from diabyte.services.intake import IntakeRepository

_INTAKE_COLUMNS = (
    "id, user_id, source_type, source_id, grams, carbs_g, dose_units, "
    "pre_bg, post_bg, occurred_at"
)


@dataclass
class SupabaseIntakeRepository(IntakeRepository):
    """Supabase implementation for intake records."""

    client: Client

    def create_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        source: SourceRef,
        grams: float,
        carbs_g: float,
        dose_units: float | None,
        pre_bg: float | None,
        post_bg: float | None,
        occurred_at: datetime,
    ) -> IntakeRecord:
        """Insert an intake row and return it."""
        response = (
            self.client.table("intakes")
            .insert(
                {
                    "user_id": str(user_id),
                    "source_type": source.kind,
                    "source_id": str(source.id),
                    "grams": grams,
                    "carbs_g": carbs_g,
                    "dose_units": dose_units,
                    "pre_bg": pre_bg,
                    "post_bg": post_bg,
                    "occurred_at": occurred_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create intake record")
        return _parse_record(response.data[0])

    def get_record(self, record_id: UUID) -> IntakeRecord | None:
        """Return an intake row by id."""
        response = (
            self.client.table("intakes")
            .select(_INTAKE_COLUMNS)
            .eq("id", str(record_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def set_post_bg(
        self, record_id: UUID, user_id: UUID, post_bg: float
    ) -> IntakeRecord | None:
        """Set post_bg, filtering on the owner in the same statement."""
        response = (
            self.client.table("intakes")
            .update({"post_bg": post_bg})
            .eq("id", str(record_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def list_records(self, user_id: UUID, limit: int) -> list[IntakeRecord]:
        """Return the user's intakes, newest first."""
        response = (
            self.client.table("intakes")
            .select(_INTAKE_COLUMNS)
            .eq("user_id", str(user_id))
            .order("occurred_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None


def _parse_record(row: dict[str, object]) -> IntakeRecord:
    return IntakeRecord(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        source=SourceRef(kind=str(row["source_type"]), id=UUID(row["source_id"])),
        grams=float(row.get("grams", 0.0)),
        carbs_g=float(row.get("carbs_g", 0.0)),
        dose_units=_optional_float(row.get("dose_units")),
        pre_bg=_optional_float(row.get("pre_bg")),
        post_bg=_optional_float(row.get("post_bg")),
        occurred_at=datetime.fromisoformat(str(row["occurred_at"])),
    )
