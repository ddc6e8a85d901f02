"""Supabase repository for recent and favorite foods."""

from dataclasses import dataclass

from supabase import Client

from macro_planner.domain.nutrition import FoodRecord, NutrientProfile
from macro_planner.services.shortcuts import ShortcutRepository


@dataclass
class SupabaseShortcutRepository(ShortcutRepository):
    """Supabase implementation storing each shortcut list as one JSON row."""

    client: Client

    def get_foods(self, user_id: str, kind: str) -> list[FoodRecord]:
        """Return the stored food list of a kind."""
        response = (
            self.client.table("food_shortcuts")
            .select("foods")
            .eq("user_id", user_id)
            .eq("kind", kind)
            .limit(1)
            .execute()
        )
        if not response.data:
            return []
        foods = response.data[0].get("foods") or []
        return [_parse_record(food) for food in foods if isinstance(food, dict)]

    def set_foods(self, user_id: str, kind: str, foods: list[FoodRecord]) -> None:
        """Replace the stored food list of a kind."""
        self.client.table("food_shortcuts").upsert(
            {
                "user_id": user_id,
                "kind": kind,
                "foods": [_dump_record(food) for food in foods],
            },
            on_conflict="user_id,kind",
        ).execute()


def _dump_record(food: FoodRecord) -> dict[str, object]:
    return {
        "fdc_id": food.fdc_id,
        "name": food.name,
        "brand": food.brand,
        "data_type": food.data_type,
        "household_serving": food.household_serving,
        "nutrition": food.nutrition.to_dict(),
    }


def _parse_record(row: dict[str, object]) -> FoodRecord:
    nutrition = row.get("nutrition")
    return FoodRecord(
        fdc_id=int(row.get("fdc_id") or 0),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        data_type=row.get("data_type"),
        household_serving=row.get("household_serving"),
        nutrition=NutrientProfile.from_dict(
            nutrition if isinstance(nutrition, dict) else {}
        ),
    )
