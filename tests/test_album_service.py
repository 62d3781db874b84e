"""Tests for album membership maintenance."""

import asyncio
from uuid import uuid4

import pytest

from pixelboard.domain.photos import UploadedFile
from pixelboard.errors import ForbiddenError, NotFoundError, ValidationError
from tests.conftest import OTHER_ID, OWNER_ID, FailingProcessor, make_image


def _ingest(photo_service, owner_id=OWNER_ID, title="Photo"):
    upload = UploadedFile(
        filename="photo.jpg", content_type="image/jpeg", content=make_image(32, 32)
    )
    return asyncio.run(photo_service.ingest(owner_id, title, None, upload))


@pytest.fixture
def quick_photo_service(photo_service):
    photo_service.processor = FailingProcessor()
    return photo_service


def test_create_album_sets_cover_and_links_photos(
    quick_photo_service, album_service, photo_repository
) -> None:
    first = _ingest(quick_photo_service)
    second = _ingest(quick_photo_service)

    album = album_service.create_album(
        OWNER_ID, " Trip ", None, [first.id, second.id, first.id]
    )

    assert album.title == "Trip"
    assert album.photos == [first.id, second.id]
    assert album.cover_photo == first.id
    assert photo_repository.photos[first.id].albums == [album.id]
    assert photo_repository.photos[second.id].albums == [album.id]


def test_create_empty_album_has_no_cover(album_service) -> None:
    album = album_service.create_album(OWNER_ID, "Empty")

    assert album.photos == []
    assert album.cover_photo is None


def test_create_album_rejects_foreign_photos(
    quick_photo_service, album_service, album_repository
) -> None:
    mine = _ingest(quick_photo_service)
    theirs = _ingest(quick_photo_service, owner_id=OTHER_ID)

    with pytest.raises(ValidationError, match="not owned by user") as exc_info:
        album_service.create_album(OWNER_ID, "Mixed", None, [mine.id, theirs.id])

    assert exc_info.value.details["photo_ids"] == [str(theirs.id)]
    assert album_repository.albums == {}


def test_add_photos_is_idempotent(
    quick_photo_service, album_service, album_repository, photo_repository
) -> None:
    photo = _ingest(quick_photo_service)
    album = album_service.create_album(OWNER_ID, "Trip")

    first = album_service.add_photos(album.id, OWNER_ID, [photo.id])
    updates_after_first = album_repository.membership_updates
    second = album_service.add_photos(album.id, OWNER_ID, [photo.id])

    assert first.photos == [photo.id]
    assert first.cover_photo == photo.id
    assert second.photos == [photo.id]
    assert album_repository.membership_updates == updates_after_first
    assert photo_repository.photos[photo.id].albums == [album.id]


def test_add_photos_with_partial_ownership_changes_nothing(
    quick_photo_service, album_service, album_repository
) -> None:
    mine = _ingest(quick_photo_service)
    theirs = _ingest(quick_photo_service, owner_id=OTHER_ID)
    album = album_service.create_album(OWNER_ID, "Trip")

    with pytest.raises(ValidationError):
        album_service.add_photos(album.id, OWNER_ID, [mine.id, theirs.id])

    assert album_repository.albums[album.id].photos == []


def test_add_photos_requires_album_owner(quick_photo_service, album_service) -> None:
    photo = _ingest(quick_photo_service, owner_id=OTHER_ID)
    album = album_service.create_album(OWNER_ID, "Trip")

    with pytest.raises(ForbiddenError, match="Not authorized to modify this album"):
        album_service.add_photos(album.id, OTHER_ID, [photo.id])


def test_remove_cover_photo_moves_cover(
    quick_photo_service, album_service, photo_repository
) -> None:
    first = _ingest(quick_photo_service)
    second = _ingest(quick_photo_service)
    album = album_service.create_album(OWNER_ID, "Trip", None, [first.id, second.id])

    updated = album_service.remove_photos(album.id, OWNER_ID, [first.id])

    assert updated.photos == [second.id]
    assert updated.cover_photo == second.id
    assert photo_repository.photos[first.id].albums == []


def test_removing_last_photo_clears_cover(quick_photo_service, album_service) -> None:
    photo = _ingest(quick_photo_service)
    album = album_service.create_album(OWNER_ID, "Trip", None, [photo.id])

    updated = album_service.remove_photos(album.id, OWNER_ID, [photo.id])

    assert updated.photos == []
    assert updated.cover_photo is None


def test_delete_album_unlinks_photos(
    quick_photo_service, album_service, album_repository, photo_repository
) -> None:
    photo = _ingest(quick_photo_service)
    keep = album_service.create_album(OWNER_ID, "Keep", None, [photo.id])
    doomed = album_service.create_album(OWNER_ID, "Doomed", None, [photo.id])

    album_service.delete_album(doomed.id, OWNER_ID)

    assert doomed.id not in album_repository.albums
    assert photo_repository.photos[photo.id].albums == [keep.id]


def test_album_photos_keep_membership_order(
    quick_photo_service, album_service
) -> None:
    first = _ingest(quick_photo_service, title="First")
    second = _ingest(quick_photo_service, title="Second")
    album = album_service.create_album(OWNER_ID, "Trip", None, [second.id, first.id])

    photos = album_service.album_photos(album)

    assert [photo.title for photo in photos] == ["Second", "First"]


def test_get_missing_album_raises_not_found(album_service) -> None:
    with pytest.raises(NotFoundError):
        album_service.get_album(uuid4())
