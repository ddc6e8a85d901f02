"""Nutrition domain models."""

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrients for one serving of a food.

    The serving itself is tracked by the owner of the profile; optional fields
    left as ``None`` count as zero wherever profiles are aggregated.
    """

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    vitamins: dict[str, float] = field(default_factory=dict)
    minerals: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly payload, omitting unset optional fields."""
        payload: dict[str, object] = {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }
        for key in ("fiber", "sugar", "sodium"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        if self.vitamins:
            payload["vitamins"] = dict(self.vitamins)
        if self.minerals:
            payload["minerals"] = dict(self.minerals)
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "NutrientProfile":
        """Build a profile from loosely typed data, coercing bad values to 0."""
        return cls(
            calories=to_amount(payload.get("calories")),
            protein=to_amount(payload.get("protein")),
            carbs=to_amount(payload.get("carbs")),
            fat=to_amount(payload.get("fat")),
            fiber=_optional_amount(payload.get("fiber")),
            sugar=_optional_amount(payload.get("sugar")),
            sodium=_optional_amount(payload.get("sodium")),
            vitamins=_amount_map(payload.get("vitamins")),
            minerals=_amount_map(payload.get("minerals")),
        )


@dataclass(frozen=True)
class FoodItem:
    """A logged food with its free-text serving and nutrients."""

    name: str
    serving_size: str
    nutrition: NutrientProfile


@dataclass(frozen=True)
class ScalingBase:
    """Reference quantity and nutrients that quantity edits rescale from."""

    base_amount: float
    base_nutrition: NutrientProfile


@dataclass(frozen=True)
class FoodRecord:
    """Food database result normalized to a 100 g serving."""

    fdc_id: int
    name: str
    brand: str | None
    data_type: str | None
    household_serving: str | None
    nutrition: NutrientProfile
    serving_size: float = 100.0
    serving_size_unit: str = "g"


@dataclass(frozen=True)
class FoodSearchPage:
    """A page of normalized food search results."""

    foods: list[FoodRecord]
    total_pages: int


def to_amount(value: object) -> float:
    """Coerce a loosely typed nutrient value into a non-negative float."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _optional_amount(value: object) -> float | None:
    if value is None:
        return None
    return to_amount(value)


def _amount_map(value: object) -> dict[str, float]:
    if not isinstance(value, dict):
        return {}
    return {str(key): to_amount(amount) for key, amount in value.items()}
