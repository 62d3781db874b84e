"""Photo endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from pixelboard.api.deps import get_container, require_user
from pixelboard.api.schemas import (
    MessageResponse,
    PhotoListResponse,
    PhotoPageResponse,
    PhotoResponse,
    PhotoUploadResponse,
    ProcessingStatusResponse,
    ReprocessResponse,
)
from pixelboard.domain.photos import PhotoRecord, UploadedFile
from pixelboard.errors import ValidationError
from pixelboard.services.photos import MAX_FEED_LIMIT, PhotoService

router = APIRouter(prefix="/api/photos", tags=["photos"])


def _photo_service(request: Request) -> PhotoService:
    return get_container(request).photo_service


def _render(service: PhotoService, photo: PhotoRecord) -> PhotoResponse:
    original_url, thumbnail_url = service.urls_for(photo)
    return PhotoResponse.from_record(photo, original_url, thumbnail_url)


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_photo(
    request: Request,
    photo: UploadFile | None = File(default=None),
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    user_id: UUID = Depends(require_user),
) -> PhotoUploadResponse:
    """Upload an image and derive its thumbnail."""
    if photo is None:
        raise ValidationError("No file uploaded")
    service = _photo_service(request)
    # Read one byte past the limit so oversize files are rejected without
    # buffering the whole body.
    content = await photo.read(service.max_upload_bytes + 1)
    upload = UploadedFile(
        filename=photo.filename or "upload",
        content_type=photo.content_type or "application/octet-stream",
        content=content,
    )
    record = await service.ingest(user_id, title or "", description, upload)
    return PhotoUploadResponse(
        message="Photo uploaded successfully", photo=_render(service, record)
    )


@router.get("/my-photos")
async def my_photos(
    request: Request, user_id: UUID = Depends(require_user)
) -> PhotoListResponse:
    """Return the caller's photos."""
    service = _photo_service(request)
    photos = [_render(service, photo) for photo in service.list_for_owner(user_id)]
    return PhotoListResponse(photos=photos, count=len(photos))


@router.get("/all")
async def all_photos(
    request: Request, page: int = 1, limit: int = MAX_FEED_LIMIT
) -> PhotoPageResponse:
    """Return one page of the public photo feed."""
    service = _photo_service(request)
    photos = [_render(service, photo) for photo in service.list_all(page, limit)]
    return PhotoPageResponse(photos=photos, page=page, limit=limit)


@router.get("/{photo_id}")
async def get_photo(photo_id: UUID, request: Request) -> PhotoResponse:
    """Return a single photo and count the view."""
    service = _photo_service(request)
    return _render(service, service.get_photo(photo_id))


@router.get("/{photo_id}/status")
async def photo_status(photo_id: UUID, request: Request) -> ProcessingStatusResponse:
    """Return the thumbnail processing state of a photo."""
    photo = _photo_service(request).get_processing_status(photo_id)
    return ProcessingStatusResponse(
        photo_id=photo.id,
        processing_status=photo.processing_status,
        processing_error=photo.processing_error,
        thumbnail_s3_key=photo.thumbnail_s3_key,
    )


@router.post("/{photo_id}/reprocess")
async def reprocess_photo(
    photo_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> ReprocessResponse:
    """Derive a fresh thumbnail from the stored original."""
    key = await _photo_service(request).reprocess(photo_id, user_id)
    return ReprocessResponse(message="Photo reprocessed", thumbnail_s3_key=key)


@router.delete("/{photo_id}")
async def delete_photo(
    photo_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> MessageResponse:
    """Delete a photo owned by the caller."""
    await _photo_service(request).delete(photo_id, user_id)
    return MessageResponse(message="Photo deleted successfully")
