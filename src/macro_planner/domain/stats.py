"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from macro_planner.domain.profile import MacroTargets


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregated totals for a period."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float


@dataclass(frozen=True)
class TargetProgress:
    """Consumed totals measured against daily targets."""

    consumed: DailyTotals
    targets: MacroTargets
    remaining_calories: float
    calories_percent: float
    protein_percent: float
    carbs_percent: float
    fat_percent: float
