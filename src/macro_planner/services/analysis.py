"""Conversion of photo analysis output into editable foods."""

import logging
from dataclasses import dataclass

from macro_planner.domain.analysis import AnalysisPayload, AnalyzedFood
from macro_planner.domain.nutrition import FoodItem, NutrientProfile
from macro_planner.services.scaling import sum_nutrition

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Foods estimated from a photo with their summed totals."""

    foods: list[FoodItem]
    total_nutrition: NutrientProfile
    confidence: float | None
    notes: str | None


def foods_from_analysis(payload: dict[str, object]) -> AnalysisResult:
    """Turn a vision payload into foods, defaulting anything missing to zero.

    Totals are recomputed from the foods; any totals the payload carries are
    ignored.
    """
    parsed = AnalysisPayload.model_validate(payload if isinstance(payload, dict) else {})
    foods = [_to_food_item(food) for food in parsed.foods]
    _logger.info("Photo analysis parsed: foods=%s", len(foods))
    return AnalysisResult(
        foods=foods,
        total_nutrition=sum_nutrition(foods),
        confidence=parsed.confidence,
        notes=parsed.notes,
    )


def _to_food_item(food: AnalyzedFood) -> FoodItem:
    return FoodItem(
        name=food.name,
        serving_size=food.quantity,
        nutrition=NutrientProfile(
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
            fiber=food.fiber,
            sugar=food.sugar,
            sodium=food.sodium,
            vitamins=dict(food.vitamins),
            minerals=dict(food.minerals),
        ),
    )
