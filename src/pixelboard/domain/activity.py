"""Domain models for the user activity log."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ActivityEntry:
    """A single best-effort activity record."""

    activity_id: str
    user_id: UUID
    activity: str
    metadata: dict[str, object]
    timestamp: datetime
    expires_at: datetime
