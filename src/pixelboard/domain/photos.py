"""Domain models for photos and their processing lifecycle."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
FAILED = "failed"

PROCESSING_STATUSES = (PENDING, PROCESSING, COMPLETED, FAILED)

_TRANSITIONS: dict[str, set[str]] = {
    PENDING: {PROCESSING},
    PROCESSING: {COMPLETED, FAILED},
    COMPLETED: set(),
    FAILED: set(),
}


def next_status(current: str, target: str, *, reprocess: bool = False) -> str:
    """Return ``target`` if the lifecycle allows moving there from ``current``.

    Reprocessing is the only path out of a terminal state, and it only ever
    lands on ``completed``.
    """
    if reprocess and target == COMPLETED:
        return target
    if target not in _TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid processing transition {current} -> {target}")
    return target


@dataclass(frozen=True)
class ImageMetadata:
    """Basic properties of a decoded image."""

    width: int | None = None
    height: int | None = None
    format: str | None = None


@dataclass(frozen=True)
class ThumbnailOptions:
    """Target geometry and encoding for a derived thumbnail."""

    width: int = 300
    height: int = 300
    quality: int = 80
    format: str = "jpeg"


@dataclass(frozen=True)
class Thumbnail:
    """Encoded thumbnail bytes and the format they were written in."""

    content: bytes
    format: str

    @property
    def content_type(self) -> str:
        return f"image/{self.format}"


@dataclass(frozen=True)
class UploadedFile:
    """An image received from a client, fully buffered."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class BlobLocation:
    """Where a blob ended up after a successful write."""

    key: str
    location: str
    etag: str | None = None


@dataclass(frozen=True)
class NewPhoto:
    """Fields required to insert a photo record."""

    title: str
    description: str
    original_name: str
    mimetype: str
    size: int
    s3_key: str
    s3_location: str
    uploaded_by: UUID


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a persisted photo."""

    id: UUID
    title: str
    description: str
    original_name: str
    mimetype: str
    size: int
    s3_key: str
    s3_location: str
    uploaded_by: UUID
    thumbnail_s3_key: str | None = None
    processing_status: str = PENDING
    processing_error: str | None = None
    metadata: ImageMetadata | None = None
    albums: list[UUID] = field(default_factory=list)
    views: int = 0
    last_viewed: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ProcessingRequest:
    """Input for a thumbnail processor.

    ``image_bytes`` may be omitted when the processor can read the original
    from the blob store itself.
    """

    image_key: str
    thumbnail_key: str
    options: ThumbnailOptions
    image_bytes: bytes | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of a successful thumbnail derivation."""

    thumbnail_key: str
    metadata: ImageMetadata


def original_key(filename: str, uploaded_at: datetime) -> str:
    """Build a collision-resistant key for an original upload."""
    extension = ""
    name = filename.rsplit("/", maxsplit=1)[-1]
    if "." in name.lstrip("."):
        extension = "." + name.rsplit(".", maxsplit=1)[-1]
    timestamp = int(uploaded_at.timestamp() * 1000)
    return f"photos/{timestamp}-{uuid4()}{extension}"


def thumbnail_key(image_key: str, revision: str | None = None) -> str:
    """Derive the thumbnail key that sits next to an original.

    A ``revision`` token is inserted for re-derivations so every run writes
    a fresh key.
    """
    directory, _, filename = image_key.rpartition("/")
    prefix = f"thumb_{revision}_" if revision else "thumb_"
    if not directory:
        return f"thumbnails/{prefix}{filename}"
    return f"{directory}/thumbnails/{prefix}{filename}"
