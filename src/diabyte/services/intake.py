"""Append-only ledger of dosing decisions."""

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from diabyte.domain.errors import Forbidden, InvalidInput, NotFound
from diabyte.domain.foods import FOOD, SourceRef
from diabyte.domain.intake import HistoryEntry, IntakeRecord
from diabyte.services.dosing import (
    DosingService,
    compute_carbs_from_density,
    validate_bg,
)
from diabyte.services.sources import SourceResolver

DEFAULT_HISTORY_LIMIT = 200

_logger = logging.getLogger(__name__)


class IntakeRepository(Protocol):
    """Persistence interface for intake records."""

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
        """Insert a record and return it."""

    def get_record(self, record_id: UUID) -> IntakeRecord | None:
        """Return a record by id, if present."""

    def set_post_bg(
        self, record_id: UUID, user_id: UUID, post_bg: float
    ) -> IntakeRecord | None:
        """Set post_bg only if the record belongs to the user."""

    def list_records(self, user_id: UUID, limit: int) -> list[IntakeRecord]:
        """Return the user's records, newest first."""


@dataclass
class IntakeLedgerService:
    """Records completed dosing decisions and serves the history."""

    repository: IntakeRepository
    sources: SourceResolver
    dosing: DosingService
    history_limit: int = DEFAULT_HISTORY_LIMIT

    def record(  # noqa: PLR0913
        self,
        user_id: UUID,
        source: SourceRef,
        grams: float,
        carbs_g: float,
        dose_units: float | None = None,
        pre_bg: float | None = None,
        post_bg: float | None = None,
    ) -> IntakeRecord:
        """Validate and append an immutable record with a server timestamp."""
        errors: dict[str, object] = {}
        if not math.isfinite(grams) or grams <= 0:
            errors["grams"] = grams
        if not math.isfinite(carbs_g) or carbs_g < 0:
            errors["carbs_g"] = carbs_g
        if dose_units is not None and (
            not math.isfinite(dose_units) or dose_units < 0
        ):
            errors["dose_units"] = dose_units
        if errors:
            raise InvalidInput("invalid intake", errors)
        validate_bg(pre_bg, "pre_bg")
        validate_bg(post_bg, "post_bg")

        record = self.repository.create_record(
            user_id=user_id,
            source=source,
            grams=grams,
            carbs_g=carbs_g,
            dose_units=dose_units,
            pre_bg=pre_bg,
            post_bg=post_bg,
            occurred_at=datetime.now(tz=UTC),
        )
        _logger.info("Intake recorded: user_id=%s record_id=%s", user_id, record.id)
        return record

    def save_intake(  # noqa: PLR0913
        self,
        user_id: UUID,
        source: str,
        source_id: UUID,
        grams: float,
        dose_units: float | None = None,
        pre_bg: float | None = None,
        post_bg: float | None = None,
        carbs_g: float | None = None,
    ) -> IntakeRecord:
        """Persist one intake, recomputing carbs from the source density.

        A caller-supplied ``carbs_g`` is only used for sources without a
        known density.
        """
        ref = self.sources.ref(source, source_id)
        resolved = self.sources.resolve(user_id, ref)
        if resolved.carbs_per_100 is not None:
            carbs_g = compute_carbs_from_density(resolved.carbs_per_100, grams)
        elif carbs_g is None:
            raise InvalidInput(
                "carbs_g is required for sources without a carbohydrate density",
                {"source": source, "source_id": str(source_id)},
            )
        return self.record(
            user_id, ref, grams, carbs_g, dose_units, pre_bg, post_bg
        )

    def calculate_and_save(
        self,
        user_id: UUID,
        food_id: UUID,
        grams: float,
        pre_bg: float | None = None,
    ) -> IntakeRecord:
        """Run the calculation and record its outcome in one step."""
        result = self.dosing.calculate(user_id, food_id, grams, pre_bg)
        return self.record(
            user_id,
            SourceRef(kind=FOOD, id=food_id),
            grams,
            result.carbs_g,
            result.dose_units,
            pre_bg,
        )

    def attach_post_bg(
        self, record_id: UUID, user_id: UUID, post_bg: float
    ) -> IntakeRecord:
        """Set the post-meal reading; later calls overwrite earlier ones."""
        validate_bg(post_bg, "post_bg")
        record = self.repository.set_post_bg(record_id, user_id, post_bg)
        if record is not None:
            _logger.info("Post BG attached: record_id=%s", record_id)
            return record
        if self.repository.get_record(record_id) is not None:
            _logger.warning(
                "Rejected post BG for foreign record: record_id=%s user_id=%s",
                record_id,
                user_id,
            )
            raise Forbidden("intake record does not belong to this user")
        raise NotFound("intake record not found", {"record_id": str(record_id)})

    def history(
        self, user_id: UUID, limit: int | None = None
    ) -> Iterator[HistoryEntry]:
        """Yield the user's records newest first with their source names.

        Each call runs a fresh query. Deleted or hidden sources get a
        placeholder name; the stored carbs and dose are unaffected.
        """
        requested = self.history_limit if limit is None else limit
        bounded = min(max(requested, 1), self.history_limit)
        names: dict[SourceRef, str] = {}
        for record in self.repository.list_records(user_id, bounded):
            if record.source not in names:
                names[record.source] = self.sources.name_of(user_id, record.source)
            yield HistoryEntry(record=record, source_name=names[record.source])
