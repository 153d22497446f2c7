"""Dosing calculation results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DosingResult:
    """Carbohydrate estimate and recommended insulin dose.

    ``dose_units`` is ``None`` when no profile or no usable carb ratio exists.
    The bolus and correction components are informational and unrounded.
    """

    carbs_g: float
    dose_units: float | None = None
    bolus_component: float | None = None
    correction_component: float | None = None

    @property
    def profile_incomplete(self) -> bool:
        """True when no dose could be suggested."""
        return self.dose_units is None
