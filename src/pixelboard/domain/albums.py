"""Domain models for albums."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class AlbumRecord:
    """Represents a persisted album."""

    id: UUID
    title: str
    description: str
    created_by: UUID
    photos: list[UUID] = field(default_factory=list)
    cover_photo: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def merge_members(
    album: AlbumRecord, photo_ids: list[UUID]
) -> tuple[list[UUID], list[UUID], UUID | None]:
    """Append new photos to an album.

    Returns the full membership, the ids that were actually added, and the
    resulting cover photo.
    """
    members = list(album.photos)
    added: list[UUID] = []
    for photo_id in photo_ids:
        if photo_id not in members:
            members.append(photo_id)
            added.append(photo_id)
    cover = album.cover_photo
    if cover is None and added:
        cover = added[0]
    return members, added, cover


def remove_members(
    album: AlbumRecord, photo_ids: list[UUID]
) -> tuple[list[UUID], UUID | None]:
    """Drop photos from an album and re-derive its cover."""
    removed = set(photo_ids)
    members = [photo_id for photo_id in album.photos if photo_id not in removed]
    cover = album.cover_photo
    if cover is not None and cover in removed:
        cover = members[0] if members else None
    return members, cover
