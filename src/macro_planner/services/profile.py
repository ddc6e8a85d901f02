"""Onboarding and profile target management."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from macro_planner.domain.logs import WeightSource
from macro_planner.domain.profile import BodyProfile, GoalProfile, UserProfile
from macro_planner.services.logs import WeightService
from macro_planner.services.targets import compute_targets

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile for a user."""

    def upsert_profile(self, profile: UserProfile) -> None:
        """Create or replace a user's profile."""


@dataclass
class ProfileService:
    """Service that keeps stored targets in sync with profile inputs."""

    repository: ProfileRepository
    weight_service: WeightService

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, if onboarding has produced one."""
        return self.repository.get_profile(user_id)

    def complete_onboarding(
        self, user_id: str, body: BodyProfile, goals: GoalProfile
    ) -> UserProfile:
        """Compute targets for a new profile and record the starting weight."""
        now = datetime.now(tz=UTC)
        profile = UserProfile(
            user_id=user_id,
            body=body,
            goals=goals,
            targets=compute_targets(body, goals),
            onboarding_completed=True,
            completed_at=now,
        )
        self.repository.upsert_profile(profile)
        self.weight_service.record(
            user_id, body.weight_kg, source=WeightSource.ONBOARDING, logged_at=now
        )
        _logger.info(
            "Onboarding completed: user_id=%s calories=%s",
            user_id,
            profile.targets.calories,
        )
        return profile

    def update_profile(
        self, user_id: str, body: BodyProfile, goals: GoalProfile
    ) -> UserProfile:
        """Replace body stats and goals, recomputing targets wholesale."""
        existing = self.repository.get_profile(user_id)
        profile = UserProfile(
            user_id=user_id,
            body=body,
            goals=goals,
            targets=compute_targets(body, goals),
            onboarding_completed=existing.onboarding_completed if existing else False,
            completed_at=existing.completed_at if existing else None,
        )
        self.repository.upsert_profile(profile)
        return profile
