"""Album endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from pixelboard.api.deps import get_container, require_user
from pixelboard.api.schemas import (
    AlbumCreateRequest,
    AlbumDetailResponse,
    AlbumListResponse,
    AlbumResponse,
    AlbumSummaryResponse,
    MessageResponse,
    PhotoIdsRequest,
    PhotoResponse,
)
from pixelboard.services.albums import AlbumService

router = APIRouter(prefix="/api/albums", tags=["albums"])


def _album_service(request: Request) -> AlbumService:
    return get_container(request).album_service


def _album_list(albums: list) -> AlbumListResponse:
    return AlbumListResponse(
        albums=[AlbumSummaryResponse.from_record(album) for album in albums],
        count=len(albums),
    )


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_album(
    payload: AlbumCreateRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> AlbumResponse:
    album = _album_service(request).create_album(
        user_id, payload.title, payload.description, payload.photo_ids
    )
    return AlbumResponse(
        message="Album created successfully",
        album=AlbumSummaryResponse.from_record(album),
    )


@router.get("/my-albums")
async def my_albums(
    request: Request, user_id: UUID = Depends(require_user)
) -> AlbumListResponse:
    return _album_list(_album_service(request).list_for_owner(user_id))


@router.get("/all")
async def all_albums(request: Request) -> AlbumListResponse:
    """Return the newest albums across all users."""
    return _album_list(_album_service(request).list_all())


@router.get("/{album_id}")
async def get_album(album_id: UUID, request: Request) -> AlbumDetailResponse:
    """Return an album with its photos in membership order."""
    container = get_container(request)
    album = container.album_service.get_album(album_id)
    photo_service = container.photo_service
    photos = []
    for photo in container.album_service.album_photos(album):
        original_url, thumbnail_url = photo_service.urls_for(photo)
        photos.append(PhotoResponse.from_record(photo, original_url, thumbnail_url))
    return AlbumDetailResponse(
        album=AlbumSummaryResponse.from_record(album), photos=photos
    )


@router.post("/{album_id}/add-photos")
async def add_photos(
    album_id: UUID,
    payload: PhotoIdsRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> AlbumResponse:
    album = _album_service(request).add_photos(album_id, user_id, payload.photo_ids)
    return AlbumResponse(
        message="Photos added to album",
        album=AlbumSummaryResponse.from_record(album),
    )


@router.post("/{album_id}/remove-photos")
async def remove_photos(
    album_id: UUID,
    payload: PhotoIdsRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> AlbumResponse:
    album = _album_service(request).remove_photos(
        album_id, user_id, payload.photo_ids
    )
    return AlbumResponse(
        message="Photos removed from album",
        album=AlbumSummaryResponse.from_record(album),
    )


@router.delete("/{album_id}")
async def delete_album(
    album_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> MessageResponse:
    _album_service(request).delete_album(album_id, user_id)
    return MessageResponse(message="Album deleted successfully")
