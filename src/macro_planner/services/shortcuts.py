"""Recent and favorite food shortcuts."""

from dataclasses import dataclass
from typing import Protocol

from macro_planner.domain.nutrition import FoodRecord

RECENT = "recent"
FAVORITE = "favorite"
MAX_RECENT_FOODS = 20


class ShortcutRepository(Protocol):
    """Persistence interface for per-user food shortcut lists."""

    def get_foods(self, user_id: str, kind: str) -> list[FoodRecord]:
        """Return the stored list of the given kind, in order."""

    def set_foods(self, user_id: str, kind: str, foods: list[FoodRecord]) -> None:
        """Replace the stored list of the given kind."""


@dataclass
class ShortcutService:
    """Service for recently used and favorite foods."""

    repository: ShortcutRepository
    max_recent: int = MAX_RECENT_FOODS

    def recent_foods(self, user_id: str) -> list[FoodRecord]:
        """Return recently used foods, most recent first."""
        return self.repository.get_foods(user_id, RECENT)

    def record_recent(self, user_id: str, food: FoodRecord) -> None:
        """Move a food to the front of the recent list."""
        current = self.repository.get_foods(user_id, RECENT)
        updated = [food] + [entry for entry in current if entry.fdc_id != food.fdc_id]
        self.repository.set_foods(user_id, RECENT, updated[: self.max_recent])

    def favorites(self, user_id: str) -> list[FoodRecord]:
        """Return favorite foods, most recently added first."""
        return self.repository.get_foods(user_id, FAVORITE)

    def toggle_favorite(self, user_id: str, food: FoodRecord) -> bool:
        """Add or remove a favorite; return True when it is now a favorite."""
        current = self.repository.get_foods(user_id, FAVORITE)
        if any(entry.fdc_id == food.fdc_id for entry in current):
            remaining = [entry for entry in current if entry.fdc_id != food.fdc_id]
            self.repository.set_foods(user_id, FAVORITE, remaining)
            return False
        self.repository.set_foods(user_id, FAVORITE, [food, *current])
        return True

    def is_favorite(self, user_id: str, fdc_id: int) -> bool:
        """Return True when the food is a favorite."""
        return any(
            entry.fdc_id == fdc_id
            for entry in self.repository.get_foods(user_id, FAVORITE)
        )
