"""Daily calorie and macro target calculation."""

import math
from collections.abc import Iterable

from macro_planner.domain.profile import (
    ActivityLevel,
    BodyProfile,
    DietaryPreference,
    Gender,
    GoalProfile,
    HealthCondition,
    MacroSplit,
    MacroTargets,
    PrimaryGoal,
)

MIN_CALORIES = 1200

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54
KG_PER_LB = 0.453592

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

# Highest priority first; the first goal present drives the adjustment.
GOAL_PRIORITY: tuple[PrimaryGoal, ...] = (
    PrimaryGoal.CONTROL_DIABETES,
    PrimaryGoal.LOSE_WEIGHT,
    PrimaryGoal.BUILD_MUSCLE,
    PrimaryGoal.GET_FIT,
)

GOAL_CALORIE_ADJUSTMENTS: dict[PrimaryGoal, float] = {
    PrimaryGoal.LOSE_WEIGHT: -500.0,
    PrimaryGoal.BUILD_MUSCLE: 300.0,
    PrimaryGoal.GET_FIT: -250.0,
    PrimaryGoal.CONTROL_DIABETES: -300.0,
    PrimaryGoal.MAINTAIN: 0.0,
}

KETO_SPLIT = MacroSplit(protein=0.25, carbs=0.05, fat=0.70)
DIABETES_SPLIT = MacroSplit(protein=0.30, carbs=0.35, fat=0.35)
GOAL_SPLITS: dict[PrimaryGoal, MacroSplit] = {
    PrimaryGoal.LOSE_WEIGHT: MacroSplit(protein=0.35, carbs=0.35, fat=0.30),
    PrimaryGoal.BUILD_MUSCLE: MacroSplit(protein=0.30, carbs=0.45, fat=0.25),
    PrimaryGoal.GET_FIT: MacroSplit(protein=0.30, carbs=0.40, fat=0.30),
    PrimaryGoal.MAINTAIN: MacroSplit(protein=0.30, carbs=0.40, fat=0.30),
}

_DIABETIC_CONDITIONS = frozenset(
    {HealthCondition.DIABETES, HealthCondition.PRE_DIABETIC}
)


def calculate_bmr(body: BodyProfile) -> float:
    """Return the Mifflin-St Jeor basal metabolic rate in kcal/day.

    Anything other than ``male`` uses the female offset.
    """
    base = 10 * body.weight_kg + 6.25 * body.height_cm - 5 * body.age
    if body.gender == Gender.MALE:
        return base + 5
    return base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Return total daily energy expenditure for an activity level."""
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def resolve_goal(goals: Iterable[PrimaryGoal]) -> PrimaryGoal:
    """Return the goal that drives targets, by fixed priority."""
    selected = set(goals)
    for goal in GOAL_PRIORITY:
        if goal in selected:
            return goal
    return PrimaryGoal.MAINTAIN


def adjust_for_goal(tdee: float, goal: PrimaryGoal) -> float:
    """Apply the goal's calorie surplus or deficit to TDEE."""
    return tdee + GOAL_CALORIE_ADJUSTMENTS.get(goal, 0.0)


def macro_split(
    goal: PrimaryGoal,
    health_conditions: Iterable[HealthCondition],
    dietary_preferences: Iterable[DietaryPreference],
) -> MacroSplit:
    """Select the calorie split for protein, carbs and fat.

    Keto overrides every other rule; diabetic conditions or the diabetes goal
    come next; otherwise the effective goal decides.
    """
    if DietaryPreference.KETO in set(dietary_preferences):
        return KETO_SPLIT
    if goal == PrimaryGoal.CONTROL_DIABETES or _DIABETIC_CONDITIONS & set(
        health_conditions
    ):
        return DIABETES_SPLIT
    return GOAL_SPLITS.get(goal, GOAL_SPLITS[PrimaryGoal.MAINTAIN])


def compute_targets(body: BodyProfile, goals: GoalProfile) -> MacroTargets:
    """Compute BMR, TDEE and the daily calorie/macro targets.

    Intermediates stay unrounded; rounding happens once on the returned values.
    """
    bmr = calculate_bmr(body)
    tdee = calculate_tdee(bmr, goals.activity_level)
    goal = resolve_goal(goals.primary_goals)
    calories = max(float(MIN_CALORIES), adjust_for_goal(tdee, goal))
    split = macro_split(goal, goals.health_conditions, goals.dietary_preferences)
    return MacroTargets(
        calories=round_half_up(calories),
        protein=round_half_up(calories * split.protein / KCAL_PER_GRAM_PROTEIN),
        carbs=round_half_up(calories * split.carbs / KCAL_PER_GRAM_CARBS),
        fat=round_half_up(calories * split.fat / KCAL_PER_GRAM_FAT),
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def convert_height_to_cm(feet: float, inches: float) -> float:
    """Convert feet and inches to centimeters."""
    return feet * CM_PER_FOOT + inches * CM_PER_INCH


def convert_lbs_to_kg(lbs: float) -> float:
    """Convert pounds to kilograms."""
    return lbs * KG_PER_LB


def convert_kg_to_lbs(kg: float) -> float:
    """Convert kilograms to pounds."""
    return kg / KG_PER_LB
