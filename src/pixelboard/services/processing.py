"""In-process thumbnail processing."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from pixelboard.domain.photos import (
    ImageMetadata,
    ProcessingRequest,
    ProcessingResult,
    Thumbnail,
)
from pixelboard.errors import DerivationError, StorageError
from pixelboard.services.photos import BlobStore, ThumbnailProcessor
from pixelboard.services.thumbnails import ThumbnailDeriver

logger = logging.getLogger(__name__)


@dataclass
class LocalThumbnailProcessor(ThumbnailProcessor):
    """Derives thumbnails with Pillow on a worker thread."""

    blob_store: BlobStore
    deriver: ThumbnailDeriver
    timeout_seconds: float = 300

    async def process(self, request: ProcessingRequest) -> ProcessingResult:
        """Derive, store and describe a thumbnail for ``request.image_key``."""
        image_bytes = request.image_bytes
        if image_bytes is None:
            image_bytes = await asyncio.to_thread(
                self.blob_store.get, request.image_key
            )
        try:
            thumbnail, metadata = await asyncio.wait_for(
                asyncio.to_thread(self._render, image_bytes, request),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise DerivationError(
                "Thumbnail generation timed out",
                details={"timeout_seconds": self.timeout_seconds},
            ) from exc

        try:
            await asyncio.to_thread(
                self.blob_store.put,
                request.thumbnail_key,
                thumbnail.content,
                thumbnail.content_type,
                {
                    "original-key": request.image_key,
                    "processed-by": "pixelboard-local",
                    "processed-at": datetime.now(tz=UTC).isoformat(),
                },
            )
        except StorageError as exc:
            raise DerivationError(
                f"Failed to store thumbnail: {exc.message}",
                details={"thumbnail_key": request.thumbnail_key},
            ) from exc

        logger.info(
            "Thumbnail stored",
            extra={
                "image_key": request.image_key,
                "thumbnail_key": request.thumbnail_key,
            },
        )
        return ProcessingResult(thumbnail_key=request.thumbnail_key, metadata=metadata)

    def _render(
        self, image_bytes: bytes, request: ProcessingRequest
    ) -> tuple[Thumbnail, ImageMetadata]:
        metadata = self.deriver.inspect(image_bytes)
        return self.deriver.derive(image_bytes, request.options), metadata
