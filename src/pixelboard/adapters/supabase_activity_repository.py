"""Supabase repository for user activity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from pixelboard.adapters.supabase_errors import translate_api_errors
from pixelboard.domain.activity import ActivityEntry
from pixelboard.services.activity import ActivityRepository


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase-backed activity repository."""

    client: Client

    @translate_api_errors
    def create_activity(self, entry: ActivityEntry) -> None:
        """Insert an activity row."""
        self.client.table("user_activity").insert(
            {
                "activity_id": entry.activity_id,
                "user_id": str(entry.user_id),
                "activity": entry.activity,
                "metadata": entry.metadata,
                "timestamp": entry.timestamp.isoformat(),
                "expires_at": entry.expires_at.isoformat(),
            }
        ).execute()

    @translate_api_errors
    def list_for_user(self, user_id: UUID, limit: int) -> list[ActivityEntry]:
        """Return recent activity rows for a user."""
        response = (
            self.client.table("user_activity")
            .select("activity_id, user_id, activity, metadata, timestamp, expires_at")
            .eq("user_id", str(user_id))
            .order("timestamp", desc=True)
            .limit(limit)
            .execute()
        )
        return [
            ActivityEntry(
                activity_id=row["activity_id"],
                user_id=UUID(row["user_id"]),
                activity=row["activity"],
                metadata=row.get("metadata") or {},
                timestamp=datetime.fromisoformat(row["timestamp"]),
                expires_at=datetime.fromisoformat(row["expires_at"]),
            )
            for row in response.data or []
        ]
