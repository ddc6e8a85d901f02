"""Food log and weight history services."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from macro_planner.domain.logs import (
    FoodLog,
    LogType,
    MealType,
    WeightEntry,
    WeightSource,
)
from macro_planner.domain.nutrition import FoodItem
from macro_planner.services.scaling import sum_nutrition


class EmptyFoodLogError(ValueError):
    """Raised when a food log is saved without any foods."""


class FoodLogRepository(Protocol):
    """Persistence interface for food logs."""

    def list_food_logs(self, user_id: str) -> list[FoodLog]:
        """Return all food logs for a user."""

    def list_food_logs_between(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLog]:
        """Return food logs logged within ``[start, end)``."""

    def get_food_log(self, user_id: str, log_id: str) -> FoodLog | None:
        """Return one of the user's food logs by id."""

    def upsert_food_log(self, log: FoodLog) -> None:
        """Create or fully replace a food log."""

    def delete_food_log(self, user_id: str, log_id: str) -> None:
        """Delete a food log by id."""


class WeightRepository(Protocol):
    """Persistence interface for weight history."""

    def list_weight_entries(self, user_id: str) -> list[WeightEntry]:
        """Return all weight entries for a user."""

    def upsert_weight_entry(self, entry: WeightEntry) -> None:
        """Create or replace a weight entry."""

    def delete_weight_entry(self, user_id: str, entry_id: str) -> None:
        """Delete a weight entry by id."""


@dataclass
class FoodLogService:
    """Service that persists confirmed meals with derived totals."""

    repository: FoodLogRepository

    def list_logs(self, user_id: str) -> list[FoodLog]:
        """Return the user's food logs, newest first."""
        logs = self.repository.list_food_logs(user_id)
        return sorted(logs, key=lambda log: log.logged_at, reverse=True)

    def get_log(self, user_id: str, log_id: str) -> FoodLog | None:
        """Return a food log if it belongs to the user."""
        return self.repository.get_food_log(user_id, log_id)

    def save_log(  # noqa: PLR0913
        self,
        user_id: str,
        foods: list[FoodItem],
        meal_type: MealType,
        log_type: LogType,
        *,
        log_id: str | None = None,
        logged_at: datetime | None = None,
        photo_url: str | None = None,
    ) -> FoodLog:
        """Create or replace a food log, recomputing totals from its foods."""
        if not foods:
            raise EmptyFoodLogError("A food log needs at least one food item")
        existing = self.repository.get_food_log(user_id, log_id) if log_id else None
        log = FoodLog(
            id=log_id or str(uuid4()),
            user_id=user_id,
            logged_at=logged_at
            or (existing.logged_at if existing else datetime.now(tz=UTC)),
            meal_type=meal_type,
            log_type=log_type,
            foods=list(foods),
            total_nutrition=sum_nutrition(foods),
            photo_url=photo_url,
        )
        self.repository.upsert_food_log(log)
        return log

    def delete_log(self, user_id: str, log_id: str) -> bool:
        """Delete a food log; return False when it does not exist."""
        if self.repository.get_food_log(user_id, log_id) is None:
            return False
        self.repository.delete_food_log(user_id, log_id)
        return True


@dataclass
class WeightService:
    """Service for a user's weight history."""

    repository: WeightRepository

    def list_entries(self, user_id: str) -> list[WeightEntry]:
        """Return weight entries, newest first."""
        entries = self.repository.list_weight_entries(user_id)
        return sorted(entries, key=lambda entry: entry.logged_at, reverse=True)

    def latest(self, user_id: str) -> WeightEntry | None:
        """Return the most recent weight entry, if any."""
        entries = self.list_entries(user_id)
        return entries[0] if entries else None

    def record(
        self,
        user_id: str,
        weight_kg: float,
        *,
        source: WeightSource = WeightSource.MANUAL,
        entry_id: str | None = None,
        logged_at: datetime | None = None,
    ) -> WeightEntry:
        """Create or replace a weight entry."""
        if weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {weight_kg}")
        entry = WeightEntry(
            id=entry_id or str(uuid4()),
            user_id=user_id,
            logged_at=logged_at or datetime.now(tz=UTC),
            weight_kg=weight_kg,
            source=source,
        )
        self.repository.upsert_weight_entry(entry)
        return entry

    def delete(self, user_id: str, entry_id: str) -> bool:
        """Delete a weight entry; return False when it does not exist."""
        entries = self.repository.list_weight_entries(user_id)
        if not any(entry.id == entry_id for entry in entries):
            return False
        self.repository.delete_weight_entry(user_id, entry_id)
        return True
