"""Photo ingestion, reprocessing and deletion."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from pixelboard.domain.albums import remove_members
from pixelboard.domain.photos import (
    COMPLETED,
    FAILED,
    PROCESSING,
    BlobLocation,
    ImageMetadata,
    NewPhoto,
    PhotoRecord,
    ProcessingRequest,
    ProcessingResult,
    ThumbnailOptions,
    UploadedFile,
    next_status,
    original_key,
    thumbnail_key,
)
from pixelboard.errors import (
    DerivationError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from pixelboard.services.activity import ActivityLogger
from pixelboard.services.albums import AlbumRepository
from pixelboard.services.validation import clean_text

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_FEED_LIMIT = 50


class PhotoRepository(Protocol):
    """Persistence interface for photo metadata."""

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        """Insert a pending photo record and return it."""

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def list_by_ids(self, photo_ids: list[UUID]) -> list[PhotoRecord]:
        """Return the photos that exist among the given ids."""

    def list_by_owner(self, owner_id: UUID) -> list[PhotoRecord]:
        """Return a user's photos, newest first."""

    def list_recent(self, offset: int, limit: int) -> list[PhotoRecord]:
        """Return a page of all photos, newest first."""

    def update_processing(
        self,
        photo_id: UUID,
        *,
        status: str,
        thumbnail_s3_key: str | None,
        processing_error: str | None,
        metadata: ImageMetadata | None,
    ) -> PhotoRecord:
        """Write processing outcome fields and return the updated record."""

    def set_albums(self, photo_id: UUID, album_ids: list[UUID]) -> None:
        """Replace a photo's album membership list."""

    def record_view(self, photo_id: UUID, views: int, viewed_at: datetime) -> None:
        """Store an updated view counter."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo record."""


class BlobStore(Protocol):
    """Binary object storage for originals and thumbnails."""

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> BlobLocation:
        """Store bytes under a key."""

    def get(self, key: str) -> bytes:
        """Return the bytes stored under a key."""

    def delete(self, key: str) -> None:
        """Remove a stored object."""

    def signed_url(self, key: str, ttl_seconds: int) -> str:
        """Return a time-limited download URL."""


class ThumbnailProcessor(Protocol):
    """Derives and stores a thumbnail for a stored original."""

    async def process(self, request: ProcessingRequest) -> ProcessingResult:
        """Return the stored thumbnail key and source image metadata."""


@dataclass
class PhotoService:
    """Application service for the photo lifecycle."""

    repository: PhotoRepository
    album_repository: AlbumRepository
    blob_store: BlobStore
    processor: ThumbnailProcessor
    activity_logger: ActivityLogger
    thumbnail_options: ThumbnailOptions = ThumbnailOptions()
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    signed_url_ttl: int = 3600

    async def ingest(
        self,
        owner_id: UUID,
        title: str,
        description: str | None,
        upload: UploadedFile,
    ) -> PhotoRecord:
        """Store an upload, derive its thumbnail and persist the record.

        Thumbnail failures leave the record in the ``failed`` state without
        failing the upload.
        """
        clean_title, clean_description = clean_text(title, description)
        self._validate_file(upload)

        uploaded_at = datetime.now(tz=UTC)
        key = original_key(upload.filename, uploaded_at)
        location = await asyncio.to_thread(
            self.blob_store.put,
            key,
            upload.content,
            upload.content_type,
            {
                "user-id": str(owner_id),
                "original-name": upload.filename,
                "upload-time": uploaded_at.isoformat(),
            },
        )
        try:
            photo = self.repository.create_photo(
                NewPhoto(
                    title=clean_title,
                    description=clean_description,
                    original_name=upload.filename,
                    mimetype=upload.content_type,
                    size=upload.size,
                    s3_key=location.key,
                    s3_location=location.location,
                    uploaded_by=owner_id,
                )
            )
        except Exception:
            await self._discard_blob(location.key)
            raise

        photo = self._mark(photo, PROCESSING)
        try:
            result = await self.processor.process(
                ProcessingRequest(
                    image_key=photo.s3_key,
                    thumbnail_key=thumbnail_key(photo.s3_key),
                    options=self.thumbnail_options,
                    image_bytes=upload.content,
                )
            )
        except DerivationError as exc:
            logger.warning(
                "Continuing without thumbnail",
                extra={"photo_id": str(photo.id), "error": exc.message},
            )
            photo = self._mark(photo, FAILED, error=exc.message)
        except Exception:
            logger.exception(
                "Thumbnail processor failed unexpectedly",
                extra={"photo_id": str(photo.id)},
            )
            photo = self._mark(photo, FAILED, error="Thumbnail generation failed")
        else:
            photo = self._mark(photo, COMPLETED, result=result)

        self.activity_logger.log(
            owner_id,
            "photo_uploaded",
            {
                "photo_id": str(photo.id),
                "title": photo.title,
                "size": photo.size,
                "processing_status": photo.processing_status,
            },
        )
        return photo

    async def reprocess(self, photo_id: UUID, requester_id: UUID) -> str:
        """Re-derive the thumbnail from the stored original."""
        photo = self._get_owned(photo_id, requester_id)
        revision = uuid4().hex[:12]
        result = await self.processor.process(
            ProcessingRequest(
                image_key=photo.s3_key,
                thumbnail_key=thumbnail_key(photo.s3_key, revision),
                options=self.thumbnail_options,
            )
        )
        self.repository.update_processing(
            photo.id,
            status=next_status(photo.processing_status, COMPLETED, reprocess=True),
            thumbnail_s3_key=result.thumbnail_key,
            processing_error=None,
            metadata=result.metadata,
        )
        previous = photo.thumbnail_s3_key
        if previous and previous != result.thumbnail_key:
            await self._discard_blob(previous)
        self.activity_logger.log(
            requester_id,
            "photo_reprocessed",
            {"photo_id": str(photo.id), "thumbnail_key": result.thumbnail_key},
        )
        return result.thumbnail_key

    async def delete(self, photo_id: UUID, requester_id: UUID) -> None:
        """Delete a photo, its blobs and its album memberships."""
        photo = self._get_owned(photo_id, requester_id)
        await self._discard_blob(photo.s3_key)
        if photo.thumbnail_s3_key:
            await self._discard_blob(photo.thumbnail_s3_key)
        for album in self.album_repository.list_containing_photo(photo.id):
            members, cover = remove_members(album, [photo.id])
            self.album_repository.update_membership(album.id, members, cover)
        self.repository.delete_photo(photo.id)
        self.activity_logger.log(
            requester_id,
            "photo_deleted",
            {"photo_id": str(photo.id), "title": photo.title},
        )

    def get_photo(self, photo_id: UUID) -> PhotoRecord:
        """Return a photo and count the view."""
        photo = self.repository.get_photo(photo_id)
        if photo is None:
            raise NotFoundError(
                "Photo not found", details={"photo_id": str(photo_id)}
            )
        viewed_at = datetime.now(tz=UTC)
        try:
            self.repository.record_view(photo.id, photo.views + 1, viewed_at)
        except Exception:
            logger.exception(
                "Failed to record photo view", extra={"photo_id": str(photo.id)}
            )
            return photo
        return replace(photo, views=photo.views + 1, last_viewed=viewed_at)

    def get_processing_status(self, photo_id: UUID) -> PhotoRecord:
        """Return a photo without touching its view counter."""
        photo = self.repository.get_photo(photo_id)
        if photo is None:
            raise NotFoundError(
                "Photo not found", details={"photo_id": str(photo_id)}
            )
        return photo

    def list_for_owner(self, owner_id: UUID) -> list[PhotoRecord]:
        """Return the owner's photos, newest first."""
        return self.repository.list_by_owner(owner_id)

    def list_all(
        self, page: int = 1, limit: int = MAX_FEED_LIMIT
    ) -> list[PhotoRecord]:
        """Return one page of the public feed."""
        if page < 1:
            raise ValidationError("page must be at least 1")
        if not 1 <= limit <= MAX_FEED_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_FEED_LIMIT}")
        return self.repository.list_recent((page - 1) * limit, limit)

    def urls_for(self, photo: PhotoRecord) -> tuple[str, str | None]:
        """Return signed URLs for the original and, if present, the thumbnail."""
        original_url = self.blob_store.signed_url(photo.s3_key, self.signed_url_ttl)
        thumbnail_url = None
        if photo.thumbnail_s3_key:
            thumbnail_url = self.blob_store.signed_url(
                photo.thumbnail_s3_key, self.signed_url_ttl
            )
        return original_url, thumbnail_url

    def _validate_file(self, upload: UploadedFile) -> None:
        if not upload.content_type.startswith("image/"):
            raise ValidationError(
                "Only image files are allowed",
                details={"mimetype": upload.content_type},
            )
        if upload.size == 0:
            raise ValidationError("No file uploaded")
        if upload.size > self.max_upload_bytes:
            raise ValidationError(
                "File too large",
                details={"size": upload.size, "max_size": self.max_upload_bytes},
            )

    def _get_owned(self, photo_id: UUID, requester_id: UUID) -> PhotoRecord:
        photo = self.repository.get_photo(photo_id)
        if photo is None:
            raise NotFoundError(
                "Photo not found", details={"photo_id": str(photo_id)}
            )
        if photo.uploaded_by != requester_id:
            raise ForbiddenError("Not authorized to modify this photo")
        return photo

    def _mark(
        self,
        photo: PhotoRecord,
        status: str,
        *,
        result: ProcessingResult | None = None,
        error: str | None = None,
    ) -> PhotoRecord:
        return self.repository.update_processing(
            photo.id,
            status=next_status(photo.processing_status, status),
            thumbnail_s3_key=result.thumbnail_key if result else None,
            processing_error=error,
            metadata=result.metadata if result else None,
        )

    async def _discard_blob(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.blob_store.delete, key)
        except StorageError:
            logger.warning("Failed to delete blob", extra={"key": key})

