"""Request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pixelboard.domain.activity import ActivityEntry
from pixelboard.domain.albums import AlbumRecord
from pixelboard.domain.photos import PhotoRecord


class ApiModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageMetadataResponse(ApiModel):
    width: int | None = None
    height: int | None = None
    format: str | None = None


class PhotoResponse(ApiModel):
    """Photo metadata plus signed download URLs."""

    id: UUID
    title: str
    description: str
    original_name: str
    mimetype: str
    size: int
    s3_key: str
    s3_location: str
    thumbnail_s3_key: str | None
    processing_status: str
    processing_error: str | None = None
    metadata: ImageMetadataResponse | None = None
    uploaded_by: UUID
    albums: list[UUID]
    views: int
    last_viewed: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    original_url: str | None = None
    thumbnail_url: str | None = None

    @classmethod
    def from_record(
        cls,
        photo: PhotoRecord,
        original_url: str | None = None,
        thumbnail_url: str | None = None,
    ) -> "PhotoResponse":
        metadata = None
        if photo.metadata is not None:
            metadata = ImageMetadataResponse(
                width=photo.metadata.width,
                height=photo.metadata.height,
                format=photo.metadata.format,
            )
        return cls(
            id=photo.id,
            title=photo.title,
            description=photo.description,
            original_name=photo.original_name,
            mimetype=photo.mimetype,
            size=photo.size,
            s3_key=photo.s3_key,
            s3_location=photo.s3_location,
            thumbnail_s3_key=photo.thumbnail_s3_key,
            processing_status=photo.processing_status,
            processing_error=photo.processing_error,
            metadata=metadata,
            uploaded_by=photo.uploaded_by,
            albums=list(photo.albums),
            views=photo.views,
            last_viewed=photo.last_viewed,
            created_at=photo.created_at,
            updated_at=photo.updated_at,
            original_url=original_url,
            thumbnail_url=thumbnail_url,
        )


class PhotoUploadResponse(ApiModel):
    message: str
    photo: PhotoResponse


class PhotoListResponse(ApiModel):
    photos: list[PhotoResponse]
    count: int


class PhotoPageResponse(ApiModel):
    photos: list[PhotoResponse]
    page: int
    limit: int


class ProcessingStatusResponse(ApiModel):
    photo_id: UUID
    processing_status: str
    processing_error: str | None = None
    thumbnail_s3_key: str | None = None


class ReprocessResponse(ApiModel):
    message: str
    thumbnail_s3_key: str


class MessageResponse(ApiModel):
    message: str


class AlbumCreateRequest(ApiModel):
    title: str
    description: str | None = None
    photo_ids: list[UUID] = Field(default_factory=list)


class PhotoIdsRequest(ApiModel):
    photo_ids: list[UUID] = Field(min_length=1)


class AlbumSummaryResponse(ApiModel):
    """Album fields without the member photo details."""

    id: UUID
    title: str
    description: str
    created_by: UUID
    photos: list[UUID]
    cover_photo: UUID | None = None
    photo_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, album: AlbumRecord) -> "AlbumSummaryResponse":
        return cls(
            id=album.id,
            title=album.title,
            description=album.description,
            created_by=album.created_by,
            photos=list(album.photos),
            cover_photo=album.cover_photo,
            photo_count=len(album.photos),
            created_at=album.created_at,
            updated_at=album.updated_at,
        )


class AlbumResponse(ApiModel):
    message: str
    album: AlbumSummaryResponse


class AlbumListResponse(ApiModel):
    albums: list[AlbumSummaryResponse]
    count: int


class AlbumDetailResponse(ApiModel):
    album: AlbumSummaryResponse
    photos: list[PhotoResponse]


class ActivityResponse(ApiModel):
    activity_id: str
    activity: str
    metadata: dict[str, object]
    timestamp: datetime
    expires_at: datetime

    @classmethod
    def from_entry(cls, entry: ActivityEntry) -> "ActivityResponse":
        return cls(
            activity_id=entry.activity_id,
            activity=entry.activity,
            metadata=entry.metadata,
            timestamp=entry.timestamp,
            expires_at=entry.expires_at,
        )


class ActivityListResponse(ApiModel):
    activities: list[ActivityResponse]
