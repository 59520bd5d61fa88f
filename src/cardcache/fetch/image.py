"""Image fetcher with Pillow decoding."""

import io

from PIL import Image, UnidentifiedImageError

from ..errors import InvalidImageData
from .http import HttpFetcher

JPEG_QUALITY = 80


def decode_image(data: bytes) -> Image.Image:
    """Decode bytes into a fully loaded Pillow image.

    Raises:
        InvalidImageData: If the bytes are empty or not a supported image
    """
    if not data:
        raise InvalidImageData("Invalid image data: empty")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as e:
        raise InvalidImageData(f"Invalid image data: {e}", e) from e
    return image


def encode_jpeg(image: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
    """Re-encode an image as JPEG.

    Raises:
        InvalidImageData: If the image cannot be encoded
    """
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    buffer = io.BytesIO()
    try:
        image.save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise InvalidImageData(f"Failed to encode image as JPEG: {e}", e) from e
    return buffer.getvalue()


class ImageFetcher(HttpFetcher):
    """Download photos and reject bodies that are not decodable images."""

    accept = "image/*"

    def validate(self, data: bytes) -> bytes:
        decode_image(data)
        return data
