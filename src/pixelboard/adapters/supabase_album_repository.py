"""Supabase-backed album repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from pixelboard.adapters.supabase_errors import translate_api_errors
from pixelboard.domain.albums import AlbumRecord
from pixelboard.errors import DependencyError
from pixelboard.services.albums import AlbumRepository

_COLUMNS = (
    "id, title, description, created_by, photos, cover_photo, created_at, updated_at"
)


@dataclass
class SupabaseAlbumRepository(AlbumRepository):
    """Supabase implementation for album persistence."""

    client: Client

    @translate_api_errors
    def create_album(  # noqa: PLR0913
        self,
        owner_id: UUID,
        title: str,
        description: str,
        photo_ids: list[UUID],
        cover_photo: UUID | None,
    ) -> AlbumRecord:
        """Insert an album row and return it."""
        response = (
            self.client.table("albums")
            .insert(
                {
                    "title": title,
                    "description": description,
                    "created_by": str(owner_id),
                    "photos": [str(photo_id) for photo_id in photo_ids],
                    "cover_photo": str(cover_photo) if cover_photo else None,
                }
            )
            .execute()
        )
        if not response.data:
            raise DependencyError("Failed to create album")
        return _to_album(response.data[0])

    @translate_api_errors
    def get_album(self, album_id: UUID) -> AlbumRecord | None:
        """Return an album by id, if present."""
        response = (
            self.client.table("albums")
            .select(_COLUMNS)
            .eq("id", str(album_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_album(response.data[0])

    @translate_api_errors
    def list_by_owner(self, owner_id: UUID) -> list[AlbumRecord]:
        """Return a user's albums, newest first."""
        response = (
            self.client.table("albums")
            .select(_COLUMNS)
            .eq("created_by", str(owner_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_album(row) for row in response.data or []]

    @translate_api_errors
    def list_recent(self, limit: int) -> list[AlbumRecord]:
        """Return the newest albums across all users."""
        response = (
            self.client.table("albums")
            .select(_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_to_album(row) for row in response.data or []]

    @translate_api_errors
    def list_containing_photo(self, photo_id: UUID) -> list[AlbumRecord]:
        """Return every album whose photo array includes the photo."""
        response = (
            self.client.table("albums")
            .select(_COLUMNS)
            .contains("photos", [str(photo_id)])
            .execute()
        )
        return [_to_album(row) for row in response.data or []]

    @translate_api_errors
    def update_membership(
        self, album_id: UUID, photo_ids: list[UUID], cover_photo: UUID | None
    ) -> None:
        """Replace an album's photo array and cover."""
        self.client.table("albums").update(
            {
                "photos": [str(photo_id) for photo_id in photo_ids],
                "cover_photo": str(cover_photo) if cover_photo else None,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(album_id)).execute()

    @translate_api_errors
    def delete_album(self, album_id: UUID) -> None:
        """Delete an album row."""
        self.client.table("albums").delete().eq("id", str(album_id)).execute()


def _parse_timestamp(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _to_album(row: dict[str, object]) -> AlbumRecord:
    cover = row.get("cover_photo")
    return AlbumRecord(
        id=UUID(str(row["id"])),
        title=str(row["title"]),
        description=str(row.get("description") or ""),
        created_by=UUID(str(row["created_by"])),
        photos=[UUID(str(photo_id)) for photo_id in row.get("photos") or []],
        cover_photo=UUID(str(cover)) if cover else None,
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
