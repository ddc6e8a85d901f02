"""Tests for container wiring."""

import asyncio

from macro_planner.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.nutrition_service is not None
    assert container.stats_service.repository is container.food_log_service.repository
    assert container.profile_service.weight_service is container.weight_service
    asyncio.run(container.close_resources())
