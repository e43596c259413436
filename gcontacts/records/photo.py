"""
Photo preparation for contact photo uploads.

Images are validated with Pillow, flattened to RGB, scaled down to a bounded
size and re-encoded as JPEG before being PUT to a contact's edit-photo link.
"""

import io
import logging

from PIL import Image

# Upload limits
MAX_PHOTO_SIZE = 1024 * 1024  # 1MB
MAX_PHOTO_DIMENSION = 1024  # pixels
JPEG_QUALITY = 85
MIN_JPEG_QUALITY = 20

# Content type of prepared photos
PHOTO_CONTENT_TYPE = "image/jpeg"

logger = logging.getLogger(__name__)


class PhotoError(Exception):
    """Raised when photo data cannot be prepared for upload."""

    pass


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True)
    return output.getvalue()


def prepare_photo(
    photo_data: bytes,
    max_size: int = MAX_PHOTO_SIZE,
    max_dimension: int = MAX_PHOTO_DIMENSION,
) -> bytes:
    """
    Validate and normalize photo data for upload.

    Args:
        photo_data: Raw image bytes in any format Pillow can read
        max_size: Maximum encoded size in bytes
        max_dimension: Maximum width/height in pixels

    Returns:
        JPEG-encoded photo data

    Raises:
        PhotoError: If the data is not an image or cannot be made small enough
    """
    if not photo_data:
        raise PhotoError("Photo data cannot be empty")

    try:
        image = Image.open(io.BytesIO(photo_data))
        image.load()
    except (Image.UnidentifiedImageError, OSError) as e:
        logger.error(f"Invalid image data: {e}")
        raise PhotoError("Invalid or unsupported image format") from e

    if image.mode not in ("RGB", "L"):
        logger.debug(f"Converting image from {image.mode} to RGB")
        if image.mode == "RGBA":
            # White background for transparent areas
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        else:
            image = image.convert("RGB")

    original_size = image.size
    if max(image.size) > max_dimension:
        image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        logger.debug(f"Resized photo from {original_size} to {image.size}")

    quality = JPEG_QUALITY
    output_data = _encode_jpeg(image, quality)

    while len(output_data) > max_size and quality > MIN_JPEG_QUALITY:
        quality -= 5
        logger.debug(
            f"Photo too large ({len(output_data)} bytes), reducing quality to {quality}"
        )
        output_data = _encode_jpeg(image, quality)

    if len(output_data) > max_size:
        raise PhotoError(
            f"Unable to reduce photo size below {max_size} bytes "
            f"(current: {len(output_data)} bytes)"
        )

    logger.debug(f"Prepared photo: {len(photo_data)} -> {len(output_data)} bytes")
    return output_data
