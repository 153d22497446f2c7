"""Import catalog foods from USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from diabyte.adapters.fdc_client import FdcClient
from diabyte.domain.errors import InvalidInput, NotFound
from diabyte.domain.foods import Food
from diabyte.services.foods import FoodCatalogService

_CARBOHYDRATE_NUTRIENT_ID = 1005
_CARBOHYDRATE_NUTRIENT_NUMBER = "205"

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class FoodImportService:
    """Copies carbohydrate density from FDC into the shared catalog."""

    catalog: FoodCatalogService
    fdc_client: FdcClient | None
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def import_food(self, fdc_id: int) -> Food:
        """Fetch an FDC food and upsert it with its carbs per 100 g."""
        client = self.fdc_client
        if client is None:
            raise InvalidInput("food import is not configured")
        if fdc_id <= 0:
            raise InvalidInput("fdc_id must be positive", {"fdc_id": fdc_id})

        try:
            payload = await self._call_with_retry(
                lambda: client.get_food(fdc_id), action=f"get_food:{fdc_id}"
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == httpx.codes.NOT_FOUND:
                raise NotFound("FDC food not found", {"fdc_id": fdc_id}) from None
            raise
        name = str(payload.get("description") or "").strip()
        brand = payload.get("brandName") or payload.get("brandOwner")
        if brand:
            name = f"{name} ({brand})"
        carbs = _extract_carbs(payload.get("foodNutrients", []))
        if carbs is None:
            raise InvalidInput(
                "food has no carbohydrate value", {"fdc_id": fdc_id}
            )
        food = self.catalog.add_food(name=name, carbs_per_100=carbs, unit="g")
        _logger.info("Imported FDC food: fdc_id=%s food_id=%s", fdc_id, food.id)
        return food

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    type(exc).__name__,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_carbs(food_nutrients: list[dict[str, object]]) -> float | None:
    """Return carbohydrate by difference per 100 g, accepting both FDC shapes."""
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        number = nutrient_info.get("number") or nutrient.get("number")
        amount = nutrient.get("amount")
        if amount is None:
            continue
        if (
            nutrient_id == _CARBOHYDRATE_NUTRIENT_ID
            or str(number) == _CARBOHYDRATE_NUTRIENT_NUMBER
        ):
            return float(amount)
    return None
