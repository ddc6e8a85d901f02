"""Supabase repository for food logs."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from macro_planner.domain.logs import FoodLog, LogType, MealType
from macro_planner.domain.nutrition import FoodItem, NutrientProfile
from macro_planner.services.logs import FoodLogRepository

_COLUMNS = (
    "id, user_id, logged_at, meal_type, log_type, photo_url, foods, total_nutrition"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food logs."""

    client: Client

    def list_food_logs(self, user_id: str) -> list[FoodLog]:
        """Return all food logs for a user, newest first."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]

    def list_food_logs_between(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLog]:
        """Return food logs within a time range."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]

    def get_food_log(self, user_id: str, log_id: str) -> FoodLog | None:
        """Return one food log by id."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("id", log_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_log(response.data[0])

    def upsert_food_log(self, log: FoodLog) -> None:
        """Create or fully replace a food log row."""
        response = (
            self.client.table("food_logs")
            .upsert(
                {
                    "id": log.id,
                    "user_id": log.user_id,
                    "logged_at": log.logged_at.isoformat(),
                    "meal_type": log.meal_type.value,
                    "log_type": log.log_type.value,
                    "photo_url": log.photo_url,
                    "foods": [_dump_food(food) for food in log.foods],
                    "total_nutrition": log.total_nutrition.to_dict(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save food log")

    def delete_food_log(self, user_id: str, log_id: str) -> None:
        """Delete a food log row."""
        self.client.table("food_logs").delete().eq("id", log_id).eq(
            "user_id", user_id
        ).execute()


def _dump_food(food: FoodItem) -> dict[str, object]:
    return {
        "name": food.name,
        "serving_size": food.serving_size,
        "nutrition": food.nutrition.to_dict(),
    }


def _parse_food(row: dict[str, object]) -> FoodItem:
    nutrition = row.get("nutrition")
    return FoodItem(
        name=str(row.get("name", "")),
        serving_size=str(row.get("serving_size", "")),
        nutrition=NutrientProfile.from_dict(
            nutrition if isinstance(nutrition, dict) else {}
        ),
    )


def _parse_log(row: dict[str, object]) -> FoodLog:
    foods = row.get("foods") or []
    totals = row.get("total_nutrition")
    return FoodLog(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        meal_type=MealType(row.get("meal_type") or MealType.SNACK),
        log_type=LogType(row.get("log_type") or LogType.PHOTO),
        foods=[_parse_food(food) for food in foods if isinstance(food, dict)],
        total_nutrition=NutrientProfile.from_dict(
            totals if isinstance(totals, dict) else {}
        ),
        photo_url=row.get("photo_url"),
    )
