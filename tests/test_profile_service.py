"""Tests for onboarding and profile updates."""

from macro_planner.domain.logs import WeightSource
from macro_planner.domain.profile import (
    ActivityLevel,
    BodyProfile,
    Gender,
    GoalProfile,
    PrimaryGoal,
)
from macro_planner.services.logs import WeightService
from macro_planner.services.profile import ProfileService
from tests.conftest import InMemoryProfileRepository, InMemoryWeightRepository


def _service() -> tuple[ProfileService, WeightService]:
    weights = WeightService(InMemoryWeightRepository())
    return ProfileService(InMemoryProfileRepository(), weights), weights


def test_complete_onboarding_stores_targets_and_weight() -> None:
    service, weights = _service()
    body = BodyProfile(gender=Gender.MALE, age=30, height_cm=180, weight_kg=80)
    goals = GoalProfile(
        activity_level=ActivityLevel.MODERATE,
        primary_goals=frozenset({PrimaryGoal.MAINTAIN}),
    )

    profile = service.complete_onboarding("user-1", body, goals)

    assert profile.onboarding_completed is True
    assert profile.completed_at is not None
    assert profile.targets.calories == 2759
    assert service.get_profile("user-1") == profile
    latest = weights.latest("user-1")
    assert latest is not None
    assert latest.weight_kg == 80
    assert latest.source == WeightSource.ONBOARDING


def test_update_profile_recomputes_targets() -> None:
    service, weights = _service()
    body = BodyProfile(gender=Gender.MALE, age=30, height_cm=180, weight_kg=80)
    goals = GoalProfile(activity_level=ActivityLevel.MODERATE)
    onboarded = service.complete_onboarding("user-1", body, goals)

    updated = service.update_profile(
        "user-1",
        body,
        GoalProfile(
            activity_level=ActivityLevel.MODERATE,
            primary_goals=frozenset({PrimaryGoal.LOSE_WEIGHT}),
        ),
    )

    assert updated.targets.calories == 2259
    assert updated.completed_at == onboarded.completed_at
    assert updated.onboarding_completed is True
    assert len(weights.list_entries("user-1")) == 1


def test_update_profile_without_onboarding() -> None:
    service, _ = _service()
    body = BodyProfile(gender=Gender.FEMALE, age=25, height_cm=165, weight_kg=60)

    profile = service.update_profile(
        "user-2", body, GoalProfile(activity_level=ActivityLevel.LIGHT)
    )

    assert profile.onboarding_completed is False
    assert profile.targets.tdee == 1850
