"""Pydantic request bodies for the HTTP API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from macro_planner.domain.logs import LogType, MealType, WeightSource
from macro_planner.domain.nutrition import FoodItem, NutrientProfile
from macro_planner.domain.profile import (
    ActivityLevel,
    BodyProfile,
    DietaryPreference,
    Gender,
    GoalProfile,
    HealthCondition,
    PrimaryGoal,
)
from macro_planner.services.targets import convert_height_to_cm, convert_lbs_to_kg


class NutrientPayload(BaseModel):
    """Nutrients for one serving."""

    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)
    vitamins: dict[str, float] = Field(default_factory=dict)
    minerals: dict[str, float] = Field(default_factory=dict)

    def to_profile(self) -> NutrientProfile:
        """Return the domain profile, dropping negative micronutrients."""
        return NutrientProfile.from_dict(self.model_dump())


class FoodItemPayload(BaseModel):
    """A food with its free-text serving."""

    name: str
    serving_size: str = ""
    nutrition: NutrientPayload = Field(default_factory=NutrientPayload)

    def to_food(self) -> FoodItem:
        """Return the domain food item."""
        return FoodItem(
            name=self.name,
            serving_size=self.serving_size,
            nutrition=self.nutrition.to_profile(),
        )


class ProfileRequest(BaseModel):
    """Body stats and goals, in metric or imperial units."""

    units: Literal["metric", "imperial"] = "metric"
    gender: Gender
    age: int
    height_cm: float | None = None
    weight_kg: float | None = None
    target_weight_kg: float | None = None
    height_ft: float | None = None
    height_in: float | None = None
    weight_lbs: float | None = None
    target_weight_lbs: float | None = None
    activity_level: ActivityLevel
    primary_goals: list[PrimaryGoal] = Field(default_factory=list)
    health_conditions: list[HealthCondition] = Field(default_factory=list)
    dietary_preferences: list[DietaryPreference] = Field(default_factory=list)

    def to_body(self) -> BodyProfile:
        """Return validated body stats; raises ``InvalidProfileError``."""
        if self.units == "imperial":
            height_cm = convert_height_to_cm(self.height_ft or 0, self.height_in or 0)
            weight_kg = convert_lbs_to_kg(self.weight_lbs or 0)
            target_weight_kg = (
                convert_lbs_to_kg(self.target_weight_lbs)
                if self.target_weight_lbs is not None
                else None
            )
        else:
            height_cm = self.height_cm or 0
            weight_kg = self.weight_kg or 0
            target_weight_kg = self.target_weight_kg
        return BodyProfile(
            gender=self.gender,
            age=self.age,
            height_cm=height_cm,
            weight_kg=weight_kg,
            target_weight_kg=target_weight_kg,
        )

    def to_goals(self) -> GoalProfile:
        """Return the goal profile."""
        return GoalProfile(
            activity_level=self.activity_level,
            primary_goals=frozenset(self.primary_goals),
            health_conditions=frozenset(self.health_conditions),
            dietary_preferences=frozenset(self.dietary_preferences),
        )


class ScaleRequest(BaseModel):
    """A quantity edit against a food's scaling base."""

    name: str = ""
    base_amount: float = Field(gt=0)
    base_nutrition: NutrientPayload
    quantity: str


class FoodLogRequest(BaseModel):
    """A confirmed meal to store."""

    meal_type: MealType
    log_type: LogType = LogType.PHOTO
    foods: list[FoodItemPayload]
    logged_at: datetime | None = None
    photo_url: str | None = None


class WeightRequest(BaseModel):
    """A weight measurement to store."""

    weight_kg: float = Field(gt=0)
    logged_at: datetime | None = None
    source: WeightSource = WeightSource.MANUAL


class FoodRefRequest(BaseModel):
    """Reference to a food database record."""

    fdc_id: int
