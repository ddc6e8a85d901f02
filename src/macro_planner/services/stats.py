"""Daily and weekly statistics for food logs."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from macro_planner.domain.logs import FoodLog
from macro_planner.domain.profile import MacroTargets
from macro_planner.domain.stats import DailyTotals, PeriodSummary, TargetProgress
from macro_planner.services.logs import FoodLogRepository

DAYS_PER_WEEK = 7


@dataclass
class StatsService:
    """Service for computing user stats by timezone."""

    repository: FoodLogRepository

    def get_today(
        self, user_id: str, timezone_name: str, now: datetime | None = None
    ) -> DailyTotals:
        """Return today's totals in the user's timezone."""
        tz = ZoneInfo(timezone_name)
        current = (now or datetime.now(tz=UTC)).astimezone(tz)
        start = current.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        logs = self.repository.list_food_logs_between(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return _aggregate_day(start.date(), logs, tz)

    def get_week(
        self, user_id: str, timezone_name: str, now: datetime | None = None
    ) -> PeriodSummary:
        """Return Monday-to-Sunday totals and daily averages."""
        tz = ZoneInfo(timezone_name)
        current = (now or datetime.now(tz=UTC)).astimezone(tz)
        start = (current - timedelta(days=current.weekday())).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        end = start + timedelta(days=DAYS_PER_WEEK)
        logs = self.repository.list_food_logs_between(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return _aggregate_period(start, DAYS_PER_WEEK, logs, tz)


def progress(consumed: DailyTotals, targets: MacroTargets) -> TargetProgress:
    """Measure consumed totals against daily targets."""
    return TargetProgress(
        consumed=consumed,
        targets=targets,
        remaining_calories=targets.calories - consumed.calories,
        calories_percent=_percent(consumed.calories, targets.calories),
        protein_percent=_percent(consumed.protein, targets.protein),
        carbs_percent=_percent(consumed.carbs, targets.carbs),
        fat_percent=_percent(consumed.fat, targets.fat),
    )


def _percent(value: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return value / target * 100


def _aggregate_day(day: date, logs: list[FoodLog], tz: ZoneInfo) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein=0, carbs=0, fat=0)
    for log in logs:
        log_day = log.logged_at.astimezone(tz).date()
        if log_day != day:
            continue
        nutrition = log.total_nutrition
        total = DailyTotals(
            day=day,
            calories=total.calories + nutrition.calories,
            protein=total.protein + nutrition.protein,
            carbs=total.carbs + nutrition.carbs,
            fat=total.fat + nutrition.fat,
        )
    return total


def _aggregate_period(
    start: datetime, days: int, logs: list[FoodLog], tz: ZoneInfo
) -> PeriodSummary:
    daily = []
    for offset in range(days):
        day = (start + timedelta(days=offset)).date()
        daily.append(_aggregate_day(day, logs, tz))

    total_days = max(len(daily), 1)
    return PeriodSummary(
        daily=daily,
        avg_calories=sum(entry.calories for entry in daily) / total_days,
        avg_protein=sum(entry.protein for entry in daily) / total_days,
        avg_carbs=sum(entry.carbs for entry in daily) / total_days,
        avg_fat=sum(entry.fat for entry in daily) / total_days,
    )
