"""Remote image processing function client."""

import json
import logging
from dataclasses import dataclass

import httpx

from pixelboard.domain.photos import (
    ImageMetadata,
    ProcessingRequest,
    ProcessingResult,
)
from pixelboard.errors import DerivationError
from pixelboard.services.photos import ThumbnailProcessor

logger = logging.getLogger(__name__)


@dataclass
class HttpxRemoteProcessor(ThumbnailProcessor):
    """Invokes a deployed image-processing function over HTTP.

    The function reads the original from the bucket, writes the thumbnail
    itself and replies with the stored key.
    """

    function_url: str
    bucket: str
    http_client: httpx.AsyncClient
    api_key: str | None = None
    timeout_seconds: float = 300

    @classmethod
    def create(
        cls,
        function_url: str,
        bucket: str,
        api_key: str | None = None,
        timeout_seconds: float = 300,
    ) -> "HttpxRemoteProcessor":
        """Create a processor client with a managed httpx session."""
        return cls(
            function_url=function_url,
            bucket=bucket,
            http_client=httpx.AsyncClient(),
            api_key=api_key,
            timeout_seconds=timeout_seconds,
        )

    async def process(self, request: ProcessingRequest) -> ProcessingResult:
        """Invoke the function and translate its reply."""
        payload = {
            "imageKey": request.image_key,
            "bucket": self.bucket,
            "options": {
                "generateThumbnail": True,
                "thumbnailSize": {
                    "width": request.options.width,
                    "height": request.options.height,
                },
                "quality": request.options.quality,
                "format": request.options.format,
                "thumbnailKey": request.thumbnail_key,
            },
        }
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            response = await self.http_client.post(
                self.function_url,
                json=payload,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise DerivationError(
                "Image processing timed out",
                details={"timeout_seconds": self.timeout_seconds},
            ) from exc
        except httpx.HTTPError as exc:
            raise DerivationError(f"Failed to process image: {exc}") from exc

        body = _decode_body(response)
        if response.is_error or body.get("success") is False or body.get("error"):
            logger.warning(
                "Image processing function returned an error",
                extra={
                    "status_code": response.status_code,
                    "image_key": request.image_key,
                },
            )
            raise DerivationError(
                f"Failed to process image: {body.get('error', response.status_code)}",
                details={"error_type": body.get("errorType")},
            )
        thumbnail = body.get("thumbnailKey")
        if not thumbnail:
            raise DerivationError("Image processing returned no thumbnail key")
        metadata = body.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise DerivationError(
                "Image processing returned an unexpected payload",
                details={"metadata_type": type(metadata).__name__},
            )
        return ProcessingResult(
            thumbnail_key=str(thumbnail),
            metadata=ImageMetadata(
                width=metadata.get("width"),
                height=metadata.get("height"),
                format=metadata.get("format"),
            ),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _decode_body(response: httpx.Response) -> dict[str, object]:
    """Unwrap either a plain JSON reply or a gateway-style ``body`` string."""
    try:
        body = response.json()
    except ValueError as exc:
        raise DerivationError("Image processing returned invalid JSON") from exc
    if not isinstance(body, dict):
        raise DerivationError("Image processing returned an unexpected payload")
    if isinstance(body.get("body"), str):
        try:
            inner = json.loads(body["body"])
        except ValueError as exc:
            raise DerivationError("Image processing returned invalid JSON") from exc
        if isinstance(inner, dict):
            return inner
    if "errorMessage" in body:
        return {
            "success": False,
            "error": body["errorMessage"],
            "errorType": body.get("errorType"),
        }
    return body
