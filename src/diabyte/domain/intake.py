"""Domain models for the intake ledger."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from diabyte.domain.foods import SourceRef


@dataclass(frozen=True)
class IntakeRecord:
    """Historical dosing decision; only ``post_bg`` may change later."""

    id: UUID
    user_id: UUID
    source: SourceRef
    grams: float
    carbs_g: float
    dose_units: float | None
    pre_bg: float | None
    post_bg: float | None
    occurred_at: datetime


@dataclass(frozen=True)
class HistoryEntry:
    """Ledger record with the display name of its source."""

    record: IntakeRecord
    source_name: str
