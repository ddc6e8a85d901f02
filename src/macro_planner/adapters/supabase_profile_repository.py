"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from macro_planner.domain.profile import (
    ActivityLevel,
    BodyProfile,
    DietaryPreference,
    Gender,
    GoalProfile,
    HealthCondition,
    MacroTargets,
    PrimaryGoal,
    UserProfile,
)
from macro_planner.services.profile import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(self, profile: UserProfile) -> None:
        """Create or replace a profile row, targets included."""
        body = profile.body
        goals = profile.goals
        targets = profile.targets
        self.client.table("profiles").upsert(
            {
                "user_id": profile.user_id,
                "gender": body.gender.value,
                "age": body.age,
                "height_cm": body.height_cm,
                "weight_kg": body.weight_kg,
                "target_weight_kg": body.target_weight_kg,
                "activity_level": goals.activity_level.value,
                "primary_goals": sorted(goal.value for goal in goals.primary_goals),
                "health_conditions": sorted(
                    condition.value for condition in goals.health_conditions
                ),
                "dietary_preferences": sorted(
                    preference.value for preference in goals.dietary_preferences
                ),
                "macro_targets": {
                    "calories": targets.calories,
                    "protein": targets.protein,
                    "carbs": targets.carbs,
                    "fat": targets.fat,
                    "bmr": targets.bmr,
                    "tdee": targets.tdee,
                },
                "onboarding_completed": profile.onboarding_completed,
                "completed_at": (
                    profile.completed_at.isoformat() if profile.completed_at else None
                ),
            },
            on_conflict="user_id",
        ).execute()


def _parse_profile(row: dict[str, object]) -> UserProfile:
    targets = row.get("macro_targets") or {}
    target_weight = row.get("target_weight_kg")
    completed_at = row.get("completed_at")
    return UserProfile(
        user_id=str(row["user_id"]),
        body=BodyProfile(
            gender=Gender(row["gender"]),
            age=int(row["age"]),
            height_cm=float(row["height_cm"]),
            weight_kg=float(row["weight_kg"]),
            target_weight_kg=float(target_weight) if target_weight else None,
        ),
        goals=GoalProfile(
            activity_level=ActivityLevel(row["activity_level"]),
            primary_goals=frozenset(
                PrimaryGoal(value) for value in row.get("primary_goals") or []
            ),
            health_conditions=frozenset(
                HealthCondition(value) for value in row.get("health_conditions") or []
            ),
            dietary_preferences=frozenset(
                DietaryPreference(value)
                for value in row.get("dietary_preferences") or []
            ),
        ),
        targets=MacroTargets(
            calories=int(targets.get("calories", 0)),
            protein=int(targets.get("protein", 0)),
            carbs=int(targets.get("carbs", 0)),
            fat=int(targets.get("fat", 0)),
            bmr=int(targets.get("bmr", 0)),
            tdee=int(targets.get("tdee", 0)),
        ),
        onboarding_completed=bool(row.get("onboarding_completed")),
        completed_at=datetime.fromisoformat(str(completed_at))
        if completed_at
        else None,
    )
