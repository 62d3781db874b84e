"""Thumbnail derivation with Pillow."""

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps

from pixelboard.domain.photos import ImageMetadata, Thumbnail, ThumbnailOptions
from pixelboard.errors import DerivationError


@dataclass
class ThumbnailDeriver:
    """Produces cover-cropped thumbnails from original image bytes.

    Every decode or encode failure, including ``SyntaxError`` from the PNG
    chunk parser, surfaces as ``DerivationError``.
    """

    resample: Image.Resampling = Image.Resampling.LANCZOS

    def derive(
        self, image_bytes: bytes, options: ThumbnailOptions | None = None
    ) -> Thumbnail:
        """Crop-to-fill the image into the target box and encode it."""
        options = options or ThumbnailOptions()
        output = BytesIO()
        try:
            with Image.open(BytesIO(image_bytes)) as image:
                source_format = image.format
                oriented = ImageOps.exif_transpose(image) or image
                thumbnail = ImageOps.fit(
                    oriented,
                    (options.width, options.height),
                    method=self.resample,
                    centering=(0.5, 0.5),
                )
                encoded_format = _encode(thumbnail, output, options, source_format)
        except Exception as exc:
            raise DerivationError(
                f"Failed to derive thumbnail: {exc}",
                details={"error_type": type(exc).__name__},
            ) from exc
        return Thumbnail(content=output.getvalue(), format=encoded_format)

    def inspect(self, image_bytes: bytes) -> ImageMetadata:
        """Return dimensions and format of an encoded image."""
        try:
            with Image.open(BytesIO(image_bytes)) as image:
                width, height = image.size
                return ImageMetadata(
                    width=width,
                    height=height,
                    format=image.format.lower() if image.format else None,
                )
        except Exception as exc:
            raise DerivationError(
                f"Failed to read image metadata: {exc}",
                details={"error_type": type(exc).__name__},
            ) from exc


def _encode(
    image: Image.Image,
    output: BytesIO,
    options: ThumbnailOptions,
    source_format: str | None,
) -> str:
    """Write the thumbnail and return the lowercase format actually used."""
    if options.format == "jpeg":
        if image.mode != "RGB":
            image = image.convert("RGB")
        image.save(output, format="JPEG", quality=options.quality)
        return "jpeg"
    if options.format == "png":
        # PNG is lossless; quality maps onto zlib effort instead.
        compress_level = min(9, max(0, round(options.quality / 100 * 9)))
        image.save(output, format="PNG", compress_level=compress_level)
        return "png"
    # Unknown formats keep whatever encoding the original used.
    fallback = source_format or "PNG"
    image.save(output, format=fallback)
    return fallback.lower()
