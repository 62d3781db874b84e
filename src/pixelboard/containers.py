"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pixelboard.adapters.remote_processor import HttpxRemoteProcessor
from pixelboard.adapters.s3_blob_store import S3BlobStore
from pixelboard.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from pixelboard.adapters.supabase_album_repository import SupabaseAlbumRepository
from pixelboard.adapters.supabase_photo_repository import SupabasePhotoRepository
from pixelboard.adapters.supabase_token_verifier import SupabaseTokenVerifier
from pixelboard.config import Settings
from pixelboard.domain.photos import ThumbnailOptions
from pixelboard.services.activity import ActivityLogger
from pixelboard.services.albums import AlbumService
from pixelboard.services.auth import TokenVerifier
from pixelboard.services.photos import PhotoService, ThumbnailProcessor
from pixelboard.services.processing import LocalThumbnailProcessor
from pixelboard.services.thumbnails import ThumbnailDeriver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_verifier: TokenVerifier
    activity_logger: ActivityLogger
    photo_service: PhotoService
    album_service: AlbumService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    album_repository = SupabaseAlbumRepository(supabase_client)
    activity_logger = ActivityLogger(
        repository=SupabaseActivityRepository(supabase_client),
        ttl_days=resolved_settings.activity_ttl_days,
        max_queue_size=resolved_settings.activity_queue_size,
    )
    blob_store = S3BlobStore.create(
        bucket=resolved_settings.s3_bucket_name,
        region=resolved_settings.aws_region,
        endpoint_url=resolved_settings.s3_endpoint_url,
        access_key_id=resolved_settings.aws_access_key_id,
        secret_access_key=resolved_settings.aws_secret_access_key,
    )

    remote_processor: HttpxRemoteProcessor | None = None
    processor: ThumbnailProcessor
    if resolved_settings.processing_mode == "remote":
        if not resolved_settings.image_processor_url:
            raise ValueError(
                "IMAGE_PROCESSOR_URL is required when PROCESSING_MODE is remote."
            )
        remote_processor = HttpxRemoteProcessor.create(
            function_url=resolved_settings.image_processor_url,
            bucket=resolved_settings.s3_bucket_name,
            api_key=resolved_settings.image_processor_key,
            timeout_seconds=resolved_settings.processing_timeout_seconds,
        )
        processor = remote_processor
    else:
        processor = LocalThumbnailProcessor(
            blob_store=blob_store,
            deriver=ThumbnailDeriver(),
            timeout_seconds=resolved_settings.processing_timeout_seconds,
        )

    photo_service = PhotoService(
        repository=photo_repository,
        album_repository=album_repository,
        blob_store=blob_store,
        processor=processor,
        activity_logger=activity_logger,
        thumbnail_options=ThumbnailOptions(
            width=resolved_settings.thumbnail_width,
            height=resolved_settings.thumbnail_height,
            quality=resolved_settings.thumbnail_quality,
            format=resolved_settings.thumbnail_format,
        ),
        max_upload_bytes=resolved_settings.max_upload_bytes,
        signed_url_ttl=resolved_settings.signed_url_expires,
    )
    album_service = AlbumService(
        repository=album_repository,
        photo_repository=photo_repository,
        activity_logger=activity_logger,
    )

    async def close_resources() -> None:
        if remote_processor is not None:
            await remote_processor.close()

    return AppContainer(
        settings=resolved_settings,
        token_verifier=SupabaseTokenVerifier(supabase_client),
        activity_logger=activity_logger,
        photo_service=photo_service,
        album_service=album_service,
        close_resources=close_resources,
    )
