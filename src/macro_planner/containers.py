"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_planner.adapters.fdc_client import HttpxFdcClient
from macro_planner.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from macro_planner.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_planner.adapters.supabase_shortcut_repository import (
    SupabaseShortcutRepository,
)
from macro_planner.adapters.supabase_weight_repository import SupabaseWeightRepository
from macro_planner.config import Settings
from macro_planner.services.cache import InMemoryCache
from macro_planner.services.logs import FoodLogService, WeightService
from macro_planner.services.nutrition import NutritionService
from macro_planner.services.profile import ProfileService
from macro_planner.services.shortcuts import ShortcutService
from macro_planner.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    food_log_service: FoodLogService
    weight_service: WeightService
    profile_service: ProfileService
    stats_service: StatsService
    shortcut_service: ShortcutService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_log_repository = SupabaseFoodLogRepository(supabase_client)
    weight_repository = SupabaseWeightRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    shortcut_repository = SupabaseShortcutRepository(supabase_client)

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    nutrition_service = NutritionService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        search_ttl_seconds=resolved_settings.food_search_ttl_seconds,
        food_ttl_seconds=resolved_settings.food_detail_ttl_seconds,
    )
    weight_service = WeightService(weight_repository)

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        food_log_service=FoodLogService(food_log_repository),
        weight_service=weight_service,
        profile_service=ProfileService(profile_repository, weight_service),
        stats_service=StatsService(food_log_repository),
        shortcut_service=ShortcutService(shortcut_repository),
        close_resources=close_resources,
    )
