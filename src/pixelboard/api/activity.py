"""Activity log endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from pixelboard.api.deps import get_container, require_user
from pixelboard.api.schemas import ActivityListResponse, ActivityResponse

router = APIRouter(prefix="/api/activity", tags=["activity"])


@router.get("/me")
async def my_activity(
    request: Request,
    limit: int = Query(default=50, ge=1, le=100),
    user_id: UUID = Depends(require_user),
) -> ActivityListResponse:
    """Return the caller's recent activity, newest first."""
    entries = get_container(request).activity_logger.recent(user_id, limit)
    return ActivityListResponse(
        activities=[ActivityResponse.from_entry(entry) for entry in entries]
    )
