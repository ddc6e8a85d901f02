"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime

import pytest

from macro_planner.adapters.fdc_client import FdcClient
from macro_planner.config import Settings
from macro_planner.containers import AppContainer
from macro_planner.domain.logs import FoodLog, WeightEntry
from macro_planner.domain.nutrition import FoodRecord
from macro_planner.domain.profile import UserProfile
from macro_planner.services.cache import InMemoryCache
from macro_planner.services.logs import (
    FoodLogRepository,
    FoodLogService,
    WeightRepository,
    WeightService,
)
from macro_planner.services.nutrition import NutritionService
from macro_planner.services.profile import ProfileRepository, ProfileService
from macro_planner.services.shortcuts import ShortcutRepository, ShortcutService
from macro_planner.services.stats import StatsService

API_TOKEN = "api-token"


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    logs: dict[str, FoodLog] = field(default_factory=dict)

    def list_food_logs(self, user_id: str) -> list[FoodLog]:
        return [log for log in self.logs.values() if log.user_id == user_id]

    def list_food_logs_between(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLog]:
        return [
            log
            for log in self.logs.values()
            if log.user_id == user_id and start <= log.logged_at < end
        ]

    def get_food_log(self, user_id: str, log_id: str) -> FoodLog | None:
        log = self.logs.get(log_id)
        if log is None or log.user_id != user_id:
            return None
        return log

    def upsert_food_log(self, log: FoodLog) -> None:
        self.logs[log.id] = log

    def delete_food_log(self, user_id: str, log_id: str) -> None:
        log = self.logs.get(log_id)
        if log is not None and log.user_id == user_id:
            del self.logs[log_id]


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight repository for tests."""

    entries: dict[str, WeightEntry] = field(default_factory=dict)

    def list_weight_entries(self, user_id: str) -> list[WeightEntry]:
        return [entry for entry in self.entries.values() if entry.user_id == user_id]

    def upsert_weight_entry(self, entry: WeightEntry) -> None:
        self.entries[entry.id] = entry

    def delete_weight_entry(self, user_id: str, entry_id: str) -> None:
        entry = self.entries.get(entry_id)
        if entry is not None and entry.user_id == user_id:
            del self.entries[entry_id]


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self.profiles.get(user_id)

    def upsert_profile(self, profile: UserProfile) -> None:
        self.profiles[profile.user_id] = profile


@dataclass
class InMemoryShortcutRepository(ShortcutRepository):
    """In-memory shortcut repository for tests."""

    lists: dict[tuple[str, str], list[FoodRecord]] = field(default_factory=dict)

    def get_foods(self, user_id: str, kind: str) -> list[FoodRecord]:
        return list(self.lists.get((user_id, kind), []))

    def set_foods(self, user_id: str, kind: str, foods: list[FoodRecord]) -> None:
        self.lists[(user_id, kind)] = list(foods)


def paneer_payload() -> dict[str, object]:
    """Branded food payload whose nutrients are already per 100 g."""
    return {
        "fdcId": 2429587,
        "description": "PANEER",
        "dataType": "Branded",
        "brandOwner": "Nanak Foods",
        "servingSize": 28,
        "servingSizeUnit": "g",
        "householdServingFullText": "1 oz",
        "foodNutrients": [
            {"nutrient": {"id": 1008}, "amount": 321},
            {"nutrient": {"id": 1003}, "amount": 25},
            {"nutrient": {"id": 1005}, "amount": 3.57},
            {"nutrient": {"id": 1004}, "amount": 25},
        ],
    }


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {"foods": [paneer_payload()], "totalPages": 1}
    )
    food_payload: dict[str, object] = field(default_factory=paneer_payload)
    search_calls: int = 0
    food_calls: int = 0

    async def search_foods(
        self, query: str, page_number: int = 1, page_size: int = 20
    ) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token=API_TOKEN,
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def container(settings: Settings, fdc_client: FakeFdcClient) -> AppContainer:
    food_log_repository = InMemoryFoodLogRepository()
    weight_service = WeightService(InMemoryWeightRepository())

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=NutritionService(
            fdc_client=fdc_client,
            cache=InMemoryCache(),
        ),
        food_log_service=FoodLogService(food_log_repository),
        weight_service=weight_service,
        profile_service=ProfileService(InMemoryProfileRepository(), weight_service),
        stats_service=StatsService(food_log_repository),
        shortcut_service=ShortcutService(InMemoryShortcutRepository()),
        close_resources=close_resources,
    )
