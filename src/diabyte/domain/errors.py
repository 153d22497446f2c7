"""Error kinds raised by the dosing core."""

import math
from collections.abc import Mapping


class DosingError(Exception):
    """Base error for dosing, meal plan and ledger operations."""

    http_status = 400

    def __init__(
        self, message: str, details: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation of the error."""
        payload: dict[str, object] = {
            "kind": type(self).__name__,
            "message": self.message,
        }
        if self.details:
            payload["details"] = {
                key: _json_safe(value) for key, value in self.details.items()
            }
        return payload

    def __str__(self) -> str:
        return self.message


class InvalidInput(DosingError):
    """Out-of-range or malformed input supplied by the caller."""

    http_status = 422


class NotFound(DosingError):
    """Referenced food, recipe, plan, item or record does not exist."""

    http_status = 404


class Forbidden(DosingError):
    """Entity exists but is not owned by the caller."""

    http_status = 403


def _json_safe(value: object) -> object:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value
