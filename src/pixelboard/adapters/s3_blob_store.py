"""S3-compatible blob store."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from pixelboard.domain.photos import BlobLocation
from pixelboard.errors import StorageError
from pixelboard.services.photos import BlobStore


@dataclass
class S3BlobStore(BlobStore):
    """Blob store backed by an S3 bucket through boto3."""

    client: Any
    bucket: str
    region: str
    endpoint_url: str | None = None

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        bucket: str,
        region: str,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
    ) -> "S3BlobStore":
        """Create a blob store with its own boto3 client."""
        client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
            config=Config(signature_version="s3v4"),
        )
        return cls(
            client=client, bucket=bucket, region=region, endpoint_url=endpoint_url
        )

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> BlobLocation:
        """Upload bytes to the bucket."""
        try:
            response = self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=_ascii_metadata(metadata or {}),
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(
                f"Failed to upload file: {exc}", details={"key": key}
            ) from exc
        return BlobLocation(
            key=key, location=self.public_url(key), etag=response.get("ETag")
        )

    def get(self, key: str) -> bytes:
        """Download an object's bytes."""
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(
                f"Failed to download file: {exc}", details={"key": key}
            ) from exc

    def delete(self, key: str) -> None:
        """Delete an object."""
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(
                f"Failed to delete file: {exc}", details={"key": key}
            ) from exc

    def signed_url(self, key: str, ttl_seconds: int) -> str:
        """Return a presigned GET URL."""
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(
                f"Failed to generate signed URL: {exc}", details={"key": key}
            ) from exc

    def public_url(self, key: str) -> str:
        """Return the unsigned URL of an object."""
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


def _ascii_metadata(metadata: dict[str, str]) -> dict[str, str]:
    """S3 user metadata must be ASCII, so percent-encode anything else."""
    return {key: quote(value, safe=" :/.-_@+") for key, value in metadata.items()}
