"""Album creation and membership maintenance."""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from pixelboard.domain.albums import AlbumRecord, merge_members, remove_members
from pixelboard.errors import ForbiddenError, NotFoundError, ValidationError
from pixelboard.services.activity import ActivityLogger
from pixelboard.services.validation import clean_text

if TYPE_CHECKING:
    from pixelboard.domain.photos import PhotoRecord
    from pixelboard.services.photos import PhotoRepository

MAX_ALBUM_FEED = 20


class AlbumRepository(Protocol):
    """Persistence interface for albums."""

    def create_album(  # noqa: PLR0913
        self,
        owner_id: UUID,
        title: str,
        description: str,
        photo_ids: list[UUID],
        cover_photo: UUID | None,
    ) -> AlbumRecord:
        """Insert an album and return it."""

    def get_album(self, album_id: UUID) -> AlbumRecord | None:
        """Return an album by id, if present."""

    def list_by_owner(self, owner_id: UUID) -> list[AlbumRecord]:
        """Return a user's albums, newest first."""

    def list_recent(self, limit: int) -> list[AlbumRecord]:
        """Return the newest albums across all users."""

    def list_containing_photo(self, photo_id: UUID) -> list[AlbumRecord]:
        """Return every album whose membership includes a photo."""

    def update_membership(
        self, album_id: UUID, photo_ids: list[UUID], cover_photo: UUID | None
    ) -> None:
        """Replace an album's photo list and cover."""

    def delete_album(self, album_id: UUID) -> None:
        """Delete an album record."""


@dataclass
class AlbumService:
    """Application service for album operations."""

    repository: AlbumRepository
    photo_repository: "PhotoRepository"
    activity_logger: ActivityLogger

    def create_album(
        self,
        owner_id: UUID,
        title: str,
        description: str | None = None,
        photo_ids: list[UUID] | None = None,
    ) -> AlbumRecord:
        """Create an album seeded with photos the owner already has."""
        clean_title, clean_description = clean_text(title, description)
        members = _dedupe(photo_ids or [])
        self._require_owned_photos(owner_id, members)
        album = self.repository.create_album(
            owner_id=owner_id,
            title=clean_title,
            description=clean_description,
            photo_ids=members,
            cover_photo=members[0] if members else None,
        )
        self._link(members, album.id)
        self.activity_logger.log(
            owner_id,
            "album_created",
            {"album_id": str(album.id), "photo_count": len(members)},
        )
        return album

    def get_album(self, album_id: UUID) -> AlbumRecord:
        """Return an album or raise when it does not exist."""
        album = self.repository.get_album(album_id)
        if album is None:
            raise NotFoundError(
                "Album not found", details={"album_id": str(album_id)}
            )
        return album

    def album_photos(self, album: AlbumRecord) -> list["PhotoRecord"]:
        """Return the album's photos in membership order."""
        by_id = {
            photo.id: photo for photo in self.photo_repository.list_by_ids(album.photos)
        }
        return [by_id[photo_id] for photo_id in album.photos if photo_id in by_id]

    def list_for_owner(self, owner_id: UUID) -> list[AlbumRecord]:
        """Return the owner's albums, newest first."""
        return self.repository.list_by_owner(owner_id)

    def list_all(self, limit: int = MAX_ALBUM_FEED) -> list[AlbumRecord]:
        """Return the public album feed."""
        return self.repository.list_recent(limit)

    def add_photos(
        self, album_id: UUID, requester_id: UUID, photo_ids: list[UUID]
    ) -> AlbumRecord:
        """Add owned photos to an album, ignoring ones already present."""
        album = self._get_owned(album_id, requester_id)
        self._require_owned_photos(requester_id, photo_ids)
        members, added, cover = merge_members(album, photo_ids)
        if added or cover != album.cover_photo:
            self.repository.update_membership(album.id, members, cover)
        self._link(added, album.id)
        return replace(album, photos=members, cover_photo=cover)

    def remove_photos(
        self, album_id: UUID, requester_id: UUID, photo_ids: list[UUID]
    ) -> AlbumRecord:
        """Remove photos from an album and fix up its cover."""
        album = self._get_owned(album_id, requester_id)
        self._require_owned_photos(requester_id, photo_ids)
        members, cover = remove_members(album, photo_ids)
        self.repository.update_membership(album.id, members, cover)
        self._unlink(photo_ids, album.id)
        return replace(album, photos=members, cover_photo=cover)

    def delete_album(self, album_id: UUID, requester_id: UUID) -> None:
        """Delete an album after pulling it out of every member photo."""
        album = self._get_owned(album_id, requester_id)
        self._unlink(album.photos, album.id)
        self.repository.delete_album(album.id)
        self.activity_logger.log(
            requester_id, "album_deleted", {"album_id": str(album.id)}
        )

    def _get_owned(self, album_id: UUID, requester_id: UUID) -> AlbumRecord:
        album = self.get_album(album_id)
        if album.created_by != requester_id:
            raise ForbiddenError("Not authorized to modify this album")
        return album

    def _require_owned_photos(self, owner_id: UUID, photo_ids: list[UUID]) -> None:
        wanted = set(photo_ids)
        if not wanted:
            return
        owned = {
            photo.id
            for photo in self.photo_repository.list_by_ids(list(wanted))
            if photo.uploaded_by == owner_id
        }
        if owned != wanted:
            raise ValidationError(
                "Some photos not found or not owned by user",
                details={"photo_ids": sorted(str(pid) for pid in wanted - owned)},
            )

    def _link(self, photo_ids: list[UUID], album_id: UUID) -> None:
        for photo in self.photo_repository.list_by_ids(photo_ids):
            if album_id not in photo.albums:
                self.photo_repository.set_albums(photo.id, [*photo.albums, album_id])

    def _unlink(self, photo_ids: list[UUID], album_id: UUID) -> None:
        for photo in self.photo_repository.list_by_ids(photo_ids):
            if album_id in photo.albums:
                self.photo_repository.set_albums(
                    photo.id, [aid for aid in photo.albums if aid != album_id]
                )


def _dedupe(photo_ids: list[UUID]) -> list[UUID]:
    return list(dict.fromkeys(photo_ids))
