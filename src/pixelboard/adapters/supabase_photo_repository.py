"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from pixelboard.adapters.supabase_errors import translate_api_errors
from pixelboard.domain.photos import ImageMetadata, NewPhoto, PhotoRecord
from pixelboard.errors import DependencyError, NotFoundError
from pixelboard.services.photos import PhotoRepository

_COLUMNS = (
    "id, title, description, original_name, mimetype, size, s3_key, s3_location, "
    "thumbnail_s3_key, processing_status, processing_error, metadata, uploaded_by, "
    "albums, views, last_viewed, created_at, updated_at"
)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo metadata persistence."""

    client: Client

    @translate_api_errors
    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        """Insert a pending photo row and return it."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "title": photo.title,
                    "description": photo.description,
                    "original_name": photo.original_name,
                    "mimetype": photo.mimetype,
                    "size": photo.size,
                    "s3_key": photo.s3_key,
                    "s3_location": photo.s3_location,
                    "uploaded_by": str(photo.uploaded_by),
                    "processing_status": "pending",
                    "albums": [],
                    "views": 0,
                }
            )
            .execute()
        )
        if not response.data:
            raise DependencyError("Failed to create photo metadata")
        return _to_photo(response.data[0])

    @translate_api_errors
    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_photo(response.data[0])

    @translate_api_errors
    def list_by_ids(self, photo_ids: list[UUID]) -> list[PhotoRecord]:
        """Return the photos that exist among the given ids."""
        if not photo_ids:
            return []
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .in_("id", [str(photo_id) for photo_id in photo_ids])
            .execute()
        )
        return [_to_photo(row) for row in response.data or []]

    @translate_api_errors
    def list_by_owner(self, owner_id: UUID) -> list[PhotoRecord]:
        """Return a user's photos, newest first."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("uploaded_by", str(owner_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_to_photo(row) for row in response.data or []]

    @translate_api_errors
    def list_recent(self, offset: int, limit: int) -> list[PhotoRecord]:
        """Return a page of all photos, newest first."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_to_photo(row) for row in response.data or []]

    @translate_api_errors
    def update_processing(
        self,
        photo_id: UUID,
        *,
        status: str,
        thumbnail_s3_key: str | None,
        processing_error: str | None,
        metadata: ImageMetadata | None,
    ) -> PhotoRecord:
        """Write processing outcome fields and return the updated row."""
        response = (
            self.client.table("photos")
            .update(
                {
                    "processing_status": status,
                    "thumbnail_s3_key": thumbnail_s3_key,
                    "processing_error": processing_error,
                    "metadata": _metadata_json(metadata),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(photo_id))
            .execute()
        )
        if not response.data:
            raise NotFoundError(
                "Photo not found", details={"photo_id": str(photo_id)}
            )
        return _to_photo(response.data[0])

    @translate_api_errors
    def set_albums(self, photo_id: UUID, album_ids: list[UUID]) -> None:
        """Replace a photo's album membership list."""
        self.client.table("photos").update(
            {
                "albums": [str(album_id) for album_id in album_ids],
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(photo_id)).execute()

    @translate_api_errors
    def record_view(self, photo_id: UUID, views: int, viewed_at: datetime) -> None:
        """Store an updated view counter."""
        self.client.table("photos").update(
            {"views": views, "last_viewed": viewed_at.isoformat()}
        ).eq("id", str(photo_id)).execute()

    @translate_api_errors
    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""
        self.client.table("photos").delete().eq("id", str(photo_id)).execute()


def _metadata_json(metadata: ImageMetadata | None) -> dict[str, object] | None:
    if metadata is None:
        return None
    return {
        "width": metadata.width,
        "height": metadata.height,
        "format": metadata.format,
    }


def _parse_timestamp(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _to_photo(row: dict[str, object]) -> PhotoRecord:
    metadata = row.get("metadata")
    return PhotoRecord(
        id=UUID(str(row["id"])),
        title=str(row["title"]),
        description=str(row.get("description") or ""),
        original_name=str(row["original_name"]),
        mimetype=str(row["mimetype"]),
        size=int(row["size"]),
        s3_key=str(row["s3_key"]),
        s3_location=str(row["s3_location"]),
        uploaded_by=UUID(str(row["uploaded_by"])),
        thumbnail_s3_key=row.get("thumbnail_s3_key"),
        processing_status=str(row.get("processing_status") or "pending"),
        processing_error=row.get("processing_error"),
        metadata=ImageMetadata(
            width=metadata.get("width"),
            height=metadata.get("height"),
            format=metadata.get("format"),
        )
        if isinstance(metadata, dict)
        else None,
        albums=[UUID(str(album_id)) for album_id in row.get("albums") or []],
        views=int(row.get("views") or 0),
        last_viewed=_parse_timestamp(row.get("last_viewed")),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
