"""Tests for photo and album domain helpers."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from pixelboard.domain.albums import AlbumRecord, merge_members, remove_members
from pixelboard.domain.photos import (
    COMPLETED,
    FAILED,
    PENDING,
    PROCESSING,
    Thumbnail,
    next_status,
    original_key,
    thumbnail_key,
)


def test_original_key_keeps_extension_and_is_unique() -> None:
    uploaded_at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    first = original_key("Holiday Photo.JPG", uploaded_at)
    second = original_key("Holiday Photo.JPG", uploaded_at)

    assert first.startswith(f"photos/{int(uploaded_at.timestamp() * 1000)}-")
    assert first.endswith(".JPG")
    assert first != second


def test_original_key_without_extension() -> None:
    key = original_key("README", datetime.now(tz=UTC))

    assert "." not in key.rsplit("/", maxsplit=1)[-1]


def test_thumbnail_key_sits_next_to_original() -> None:
    assert (
        thumbnail_key("photos/123-abc.jpg") == "photos/thumbnails/thumb_123-abc.jpg"
    )
    assert thumbnail_key("abc.jpg") == "thumbnails/thumb_abc.jpg"
    assert (
        thumbnail_key("photos/123-abc.jpg", "r1")
        == "photos/thumbnails/thumb_r1_123-abc.jpg"
    )


@pytest.mark.parametrize(
    ("current", "target"),
    [(PENDING, PROCESSING), (PROCESSING, COMPLETED), (PROCESSING, FAILED)],
)
def test_next_status_allows_forward_moves(current, target) -> None:
    assert next_status(current, target) == target


@pytest.mark.parametrize(
    ("current", "target"),
    [(PENDING, COMPLETED), (COMPLETED, PROCESSING), (FAILED, COMPLETED)],
)
def test_next_status_rejects_invalid_moves(current, target) -> None:
    with pytest.raises(ValueError, match="Invalid processing transition"):
        next_status(current, target)


def test_reprocess_can_complete_from_terminal_states() -> None:
    assert next_status(FAILED, COMPLETED, reprocess=True) == COMPLETED
    assert next_status(COMPLETED, COMPLETED, reprocess=True) == COMPLETED
    with pytest.raises(ValueError):
        next_status(COMPLETED, FAILED, reprocess=True)


def test_thumbnail_content_type_follows_encoded_format() -> None:
    assert Thumbnail(content=b"", format="jpeg").content_type == "image/jpeg"
    assert Thumbnail(content=b"", format="png").content_type == "image/png"


def test_merge_and_remove_members_track_cover() -> None:
    first, second = uuid4(), uuid4()
    album = AlbumRecord(id=uuid4(), title="t", description="", created_by=uuid4())

    members, added, cover = merge_members(album, [first, second, first])
    assert members == [first, second]
    assert added == [first, second]
    assert cover == first

    album = AlbumRecord(
        id=album.id,
        title="t",
        description="",
        created_by=album.created_by,
        photos=members,
        cover_photo=cover,
    )
    members, cover = remove_members(album, [second])
    assert members == [first]
    assert cover == first
