"""Serving-size scaling for logged foods."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from macro_planner.domain.nutrition import (
    FoodItem,
    FoodRecord,
    NutrientProfile,
    ScalingBase,
)

MIN_BASE_AMOUNT = 0.01
RECORD_BASE_AMOUNT = 100.0
RECORD_SERVING_TEXT = "100 g"

_AMOUNT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


def scale_nutrition(base: NutrientProfile, factor: float) -> NutrientProfile:
    """Multiply every nutrient by ``factor``, rounding each to 2 decimals."""
    return NutrientProfile(
        calories=_scaled(base.calories, factor),
        protein=_scaled(base.protein, factor),
        carbs=_scaled(base.carbs, factor),
        fat=_scaled(base.fat, factor),
        fiber=_scaled_optional(base.fiber, factor),
        sugar=_scaled_optional(base.sugar, factor),
        sodium=_scaled_optional(base.sodium, factor),
        vitamins={key: _scaled(value, factor) for key, value in base.vitamins.items()},
        minerals={key: _scaled(value, factor) for key, value in base.minerals.items()},
    )


def parse_quantity_amount(text: str) -> float:
    """Return the first number in a free-text quantity, or 0 if there is none."""
    match = _AMOUNT_PATTERN.search(text or "")
    if not match:
        return 0.0
    return float(match.group(1))


def scaling_factor(new_amount: float, base_amount: float) -> float:
    """Return the multiplier from a base amount to a new amount."""
    return new_amount / max(base_amount, MIN_BASE_AMOUNT)


def create_scaling_base(food: FoodItem) -> ScalingBase:
    """Capture a food's current serving as the reference for later edits."""
    amount = parse_quantity_amount(food.serving_size) or 1.0
    return ScalingBase(
        base_amount=max(MIN_BASE_AMOUNT, amount),
        base_nutrition=food.nutrition,
    )


def rescale_food(food: FoodItem, base: ScalingBase, quantity_text: str) -> FoodItem:
    """Return ``food`` with a new quantity, rescaled from its scaling base.

    Quantities without a positive number keep the text but leave the
    nutrients untouched.
    """
    amount = parse_quantity_amount(quantity_text)
    if amount <= 0:
        return replace(food, serving_size=quantity_text)
    factor = scaling_factor(amount, base.base_amount)
    return replace(
        food,
        serving_size=quantity_text,
        nutrition=scale_nutrition(base.base_nutrition, factor),
    )


def apply_food_record(
    food: FoodItem, record: FoodRecord
) -> tuple[FoodItem, ScalingBase]:
    """Replace a food with a per-100 g database record and its new base."""
    base = ScalingBase(
        base_amount=RECORD_BASE_AMOUNT,
        base_nutrition=record.nutrition,
    )
    updated = replace(
        food,
        name=record.name,
        serving_size=RECORD_SERVING_TEXT,
        nutrition=scale_nutrition(record.nutrition, 1.0),
    )
    return updated, base


def empty_nutrition() -> NutrientProfile:
    """Return a zeroed macro profile."""
    return NutrientProfile(calories=0.0, protein=0.0, carbs=0.0, fat=0.0)


def sum_nutrition(foods: Iterable[FoodItem]) -> NutrientProfile:
    """Sum macros plus fiber, sugar and sodium across foods."""
    calories = protein = carbs = fat = fiber = sugar = sodium = 0.0
    for food in foods:
        nutrition = food.nutrition
        calories += nutrition.calories or 0.0
        protein += nutrition.protein or 0.0
        carbs += nutrition.carbs or 0.0
        fat += nutrition.fat or 0.0
        fiber += nutrition.fiber or 0.0
        sugar += nutrition.sugar or 0.0
        sodium += nutrition.sodium or 0.0
    return NutrientProfile(
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=fiber,
        sugar=sugar,
        sodium=sodium,
    )


@dataclass
class EditSession:
    """Foods being edited together with the bases they rescale from."""

    foods: list[FoodItem] = field(default_factory=list)
    bases: list[ScalingBase] = field(default_factory=list)

    @classmethod
    def start(cls, foods: Iterable[FoodItem]) -> "EditSession":
        """Open a session, capturing a scaling base for every food."""
        items = list(foods)
        return cls(foods=items, bases=[create_scaling_base(food) for food in items])

    def add_food(self, food: FoodItem | None = None) -> int:
        """Append a food (blank by default) and return its index."""
        item = food or FoodItem(name="", serving_size="", nutrition=empty_nutrition())
        self.foods.append(item)
        self.bases.append(create_scaling_base(item))
        return len(self.foods) - 1

    def remove_food(self, index: int) -> None:
        """Drop a food and its base."""
        del self.foods[index]
        del self.bases[index]

    def change_quantity(self, index: int, quantity_text: str) -> FoodItem:
        """Rescale one food from its stored base."""
        updated = rescale_food(self.foods[index], self.bases[index], quantity_text)
        self.foods[index] = updated
        return updated

    def apply_record(self, index: int, record: FoodRecord) -> FoodItem:
        """Swap one food for a database record and rebase it."""
        updated, base = apply_food_record(self.foods[index], record)
        self.foods[index] = updated
        self.bases[index] = base
        return updated

    def totals(self) -> NutrientProfile:
        """Return the summed nutrition of the current foods."""
        return sum_nutrition(self.foods)


def _scaled(value: float, factor: float) -> float:
    return round((value or 0.0) * factor, 2)


def _scaled_optional(value: float | None, factor: float) -> float | None:
    if value is None:
        return None
    return _scaled(value, factor)
