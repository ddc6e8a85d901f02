"""Domain models for food and weight logs."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from macro_planner.domain.nutrition import FoodItem, NutrientProfile


class MealType(StrEnum):
    """Meal a food log belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class LogType(StrEnum):
    """How a food log was created."""

    PHOTO = "photo"
    MANUAL_SEARCH = "manual_search"


class WeightSource(StrEnum):
    """Origin of a weight entry."""

    MANUAL = "manual"
    ONBOARDING = "onboarding"


@dataclass(frozen=True)
class FoodLog:
    """A confirmed meal with its foods and derived totals."""

    id: str
    user_id: str
    logged_at: datetime
    meal_type: MealType
    log_type: LogType
    foods: list[FoodItem]
    total_nutrition: NutrientProfile
    photo_url: str | None = None


@dataclass(frozen=True)
class WeightEntry:
    """A body weight measurement."""

    id: str
    user_id: str
    logged_at: datetime
    weight_kg: float
    source: WeightSource
