"""Domain models for body stats, goals and daily targets."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class InvalidProfileError(ValueError):
    """Raised when body stats fall outside their valid range."""


class Gender(StrEnum):
    """Gender used for the BMR offset."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "veryActive"


class PrimaryGoal(StrEnum):
    """Goals a user can select during onboarding."""

    LOSE_WEIGHT = "lose_weight"
    BUILD_MUSCLE = "build_muscle"
    MAINTAIN = "maintain"
    GET_FIT = "get_fit"
    CONTROL_DIABETES = "control_diabetes"


class HealthCondition(StrEnum):
    """Health conditions that influence the macro split."""

    DIABETES = "diabetes"
    PRE_DIABETIC = "pre_diabetic"
    HIGH_BP = "high_bp"
    HIGH_CHOLESTEROL = "high_cholesterol"
    PCOS = "pcos"
    THYROID = "thyroid"
    HEART_DISEASE = "heart_disease"
    NONE = "none"


class DietaryPreference(StrEnum):
    """Dietary preferences that influence the macro split."""

    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    KETO = "keto"
    PALEO = "paleo"
    HALAL = "halal"
    NONE = "none"


@dataclass(frozen=True)
class BodyProfile:
    """Body statistics for a target calculation.

    Construction rejects non-positive values so the calculator can rely on
    physiologically meaningful input.
    """

    gender: Gender
    age: int
    height_cm: float
    weight_kg: float
    target_weight_kg: float | None = None

    def __post_init__(self) -> None:
        if self.age <= 0:
            raise InvalidProfileError(f"age must be positive, got {self.age}")
        if self.height_cm <= 0:
            raise InvalidProfileError(
                f"height_cm must be positive, got {self.height_cm}"
            )
        if self.weight_kg <= 0:
            raise InvalidProfileError(
                f"weight_kg must be positive, got {self.weight_kg}"
            )
        if self.target_weight_kg is not None and self.target_weight_kg <= 0:
            raise InvalidProfileError(
                f"target_weight_kg must be positive, got {self.target_weight_kg}"
            )


@dataclass(frozen=True)
class GoalProfile:
    """Activity level, goals and constraints for a target calculation."""

    activity_level: ActivityLevel
    primary_goals: frozenset[PrimaryGoal] = field(default_factory=frozenset)
    health_conditions: frozenset[HealthCondition] = field(default_factory=frozenset)
    dietary_preferences: frozenset[DietaryPreference] = field(
        default_factory=frozenset
    )


@dataclass(frozen=True)
class MacroSplit:
    """Fraction of daily calories allocated to each macro."""

    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MacroTargets:
    """Daily calorie and macro gram targets."""

    calories: int
    protein: int
    carbs: int
    fat: int
    bmr: int
    tdee: int


@dataclass(frozen=True)
class UserProfile:
    """Stored onboarding data with the targets derived from it."""

    user_id: str
    body: BodyProfile
    goals: GoalProfile
    targets: MacroTargets
    onboarding_completed: bool
    completed_at: datetime | None = None
