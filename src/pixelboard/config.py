"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    s3_bucket_name: str = "pixelboard-uploads"
    aws_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    signed_url_expires: int = 60 * 60
    max_upload_bytes: int = 10 * 1024 * 1024
    processing_mode: str = "local"
    image_processor_url: str | None = None
    image_processor_key: str | None = None
    processing_timeout_seconds: float = 300
    thumbnail_width: int = 300
    thumbnail_height: int = 300
    thumbnail_quality: int = 80
    thumbnail_format: str = "jpeg"
    activity_queue_size: int = 1000
    activity_ttl_days: int = 30
    cors_origins: str | None = None
    environment: str = _ENVIRONMENT
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None, environment: str) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None or not raw.strip():
        if environment == "production":
            return []
        return ["http://localhost:3000", "http://127.0.0.1:3000"]
    origins = [item.strip().rstrip("/") for item in raw.split(",") if item.strip()]
    return list(dict.fromkeys(origins))
