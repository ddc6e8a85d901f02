"""Supabase repository for weight history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from macro_planner.domain.logs import WeightEntry, WeightSource
from macro_planner.services.logs import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for weight entries."""

    client: Client

    def list_weight_entries(self, user_id: str) -> list[WeightEntry]:
        """Return weight entries for a user, newest first."""
        response = (
            self.client.table("weight_entries")
            .select("id, user_id, logged_at, weight_kg, source")
            .eq("user_id", user_id)
            .order("logged_at", desc=True)
            .execute()
        )
        return [
            WeightEntry(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                logged_at=datetime.fromisoformat(str(row["logged_at"])),
                weight_kg=float(row.get("weight_kg", 0.0)),
                source=WeightSource(row.get("source") or WeightSource.MANUAL),
            )
            for row in response.data or []
        ]

    def upsert_weight_entry(self, entry: WeightEntry) -> None:
        """Create or replace a weight entry row."""
        self.client.table("weight_entries").upsert(
            {
                "id": entry.id,
                "user_id": entry.user_id,
                "logged_at": entry.logged_at.isoformat(),
                "weight_kg": entry.weight_kg,
                "source": entry.source.value,
            }
        ).execute()

    def delete_weight_entry(self, user_id: str, entry_id: str) -> None:
        """Delete a weight entry row."""
        self.client.table("weight_entries").delete().eq("id", entry_id).eq(
            "user_id", user_id
        ).execute()
