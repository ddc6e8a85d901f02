"""Food database lookups and per-100 g nutrient normalization."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from macro_planner.adapters.fdc_client import FdcClient
from macro_planner.domain.nutrition import (
    FoodRecord,
    FoodSearchPage,
    NutrientProfile,
    to_amount,
)
from macro_planner.services.cache import Cache
from macro_planner.services.targets import round_half_up

# Alternate ids are tried in order; the first strictly positive amount wins.
NUTRIENT_IDS: dict[str, tuple[int, ...]] = {
    "calories": (1008, 2047, 2048),
    "protein": (1003,),
    "carbs": (1005,),
    "fat": (1004,),
    "fiber": (1079,),
    "sugar": (2000, 1063),
    "sodium": (1093,),
    "calcium": (1087,),
    "iron": (1089,),
    "potassium": (1092,),
}

LABEL_KEYS: dict[str, str] = {
    "calories": "calories",
    "protein": "protein",
    "carbs": "carbohydrates",
    "fat": "fat",
    "fiber": "fiber",
    "sugar": "sugars",
    "sodium": "sodium",
    "calcium": "calcium",
    "iron": "iron",
    "potassium": "potassium",
}

GRAMS_PER_UNIT: dict[str, float] = {
    "g": 1.0,
    "oz": 28.3495,
    "lb": 453.592,
    "kg": 1000.0,
}

MINERAL_KEYS = ("calcium", "iron", "potassium")
REFERENCE_GRAMS = 100.0
REFERENCE_TOLERANCE_GRAMS = 0.5

_WORD_START = re.compile(r"\b\w")

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Service for food database searches with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 7 * 24 * 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(
        self, query: str, page: int = 1, page_size: int = 20
    ) -> FoodSearchPage:
        """Search foods and normalize every result to 100 g."""
        cache_key = f"fdc:search:{query.lower()}:{page}:{page_size}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodSearchPage):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(
                query, page_number=page, page_size=page_size
            ),
            action="search",
        )
        foods = [format_food_record(food) for food in payload.get("foods") or []]
        result = FoodSearchPage(
            foods=foods, total_pages=int(payload.get("totalPages") or 0)
        )
        self.cache.set(cache_key, result, ttl_seconds=self.search_ttl_seconds)
        _logger.info("Food search: query=%s results=%s", query, len(foods))
        return result

    async def get_food(self, fdc_id: int) -> FoodRecord:
        """Fetch one food and normalize it to 100 g."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodRecord):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        record = format_food_record(payload)
        self.cache.set(cache_key, record, ttl_seconds=self.food_ttl_seconds)
        return record

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
                    "Food database %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def normalize_nutrient_source(raw: dict[str, object]) -> NutrientProfile:
    """Return a food record's nutrients per 100 g.

    Per-100 g nutrient entries are trusted as a whole when any of them is
    positive. Otherwise the per-serving label block is converted.
    """
    entries = raw.get("foodNutrients")
    nutrients = entries if isinstance(entries, list) else []
    per_100g = {
        key: _nutrient_amount(nutrients, ids) for key, ids in NUTRIENT_IDS.items()
    }
    if any(value > 0 for value in per_100g.values()):
        values = per_100g
    else:
        label = raw.get("labelNutrients")
        label_block = label if isinstance(label, dict) else {}
        serving_size = to_amount(raw.get("servingSize"))
        serving_unit = str(raw.get("servingSizeUnit") or "g")
        values = {
            key: _label_per_100g(
                _label_value(label_block, label_key), serving_size, serving_unit
            )
            for key, label_key in LABEL_KEYS.items()
        }
    return NutrientProfile(
        calories=_round1(values["calories"]),
        protein=_round1(values["protein"]),
        carbs=_round1(values["carbs"]),
        fat=_round1(values["fat"]),
        fiber=_round1(values["fiber"]),
        sugar=_round1(values["sugar"]),
        sodium=_round1(values["sodium"]),
        minerals={key: _round1(values[key]) for key in MINERAL_KEYS},
    )


def format_food_record(raw: dict[str, object]) -> FoodRecord:
    """Build a display-ready food record from raw database data."""
    description = str(raw.get("description") or "")
    return FoodRecord(
        fdc_id=int(raw.get("fdcId") or 0),
        name=_title_case(description) or "Unknown",
        brand=_optional_text(raw.get("brandName") or raw.get("brandOwner")),
        data_type=_optional_text(raw.get("dataType")),
        household_serving=_optional_text(raw.get("householdServingFullText")),
        nutrition=normalize_nutrient_source(raw),
    )


def serving_grams(serving_size: float, serving_unit: str) -> float:
    """Convert a serving size to grams; unknown units count as grams."""
    unit = (serving_unit or "g").strip().lower()
    return serving_size * GRAMS_PER_UNIT.get(unit, 1.0)


def _nutrient_amount(nutrients: list[object], ids: tuple[int, ...]) -> float:
    for nutrient_id in ids:
        hit = next(
            (
                entry
                for entry in nutrients
                if isinstance(entry, dict) and _entry_id(entry) == nutrient_id
            ),
            None,
        )
        if hit is None:
            continue
        value = hit.get("value")
        if value is None:
            value = hit.get("amount")
        amount = to_amount(value)
        if amount > 0:
            return amount
    return 0.0


def _entry_id(entry: dict[str, object]) -> object:
    nutrient_id = entry.get("nutrientId")
    if nutrient_id is None:
        nutrient_info = entry.get("nutrient")
        if isinstance(nutrient_info, dict):
            nutrient_id = nutrient_info.get("id")
    return nutrient_id


def _label_value(label: dict[str, object], key: str) -> float:
    block = label.get(key)
    if not isinstance(block, dict):
        return 0.0
    return to_amount(block.get("value"))


def _label_per_100g(value: float, serving_size: float, serving_unit: str) -> float:
    if not value or serving_size <= 0:
        return value
    grams = serving_grams(serving_size, serving_unit)
    if abs(grams - REFERENCE_GRAMS) < REFERENCE_TOLERANCE_GRAMS:
        return value
    return value / grams * REFERENCE_GRAMS


def _round1(value: float) -> float:
    return round_half_up(value * 10) / 10


def _title_case(text: str) -> str:
    return _WORD_START.sub(lambda match: match.group(0).upper(), text.lower())


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
