"""
Image utilities for the upload step.

Handles decoding uploaded bytes and converting between raw bytes, base64
strings and data URLs.
"""
import base64
import binascii
from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError


class ImageDecodeError(ValueError):
    """Uploaded content is not a readable image."""


def strip_data_url(value: str) -> str:
    """
    Return the base64 payload of a data URL, or the value unchanged.

    'data:image/png;base64,AAAA' -> 'AAAA'
    """
    if value.startswith('data:') and ',' in value:
        return value.split(',', 1)[1]
    return value


def decode_upload(content: bytes) -> Tuple[str, Tuple[int, int]]:
    """
    Validate uploaded bytes as an image and encode them for the backend.

    The original bytes are forwarded untouched; Pillow is only used to make
    sure the file is an image.

    Args:
        content: Raw uploaded file content

    Returns:
        (base64 string, (width, height))

    Raises:
        ImageDecodeError: if the content is empty or not a supported image
    """
    if not content:
        raise ImageDecodeError("Empty upload")
    try:
        with Image.open(BytesIO(content)) as img:
            size = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e
    return base64.b64encode(content).decode(), size


def decode_base64_image(b64_string: str) -> Image.Image:
    """
    Decode base64 string (or data URL) to PIL Image.

    Raises:
        ImageDecodeError: if the payload is not valid base64 image data
    """
    try:
        img_data = base64.b64decode(strip_data_url(b64_string), validate=True)
        img = Image.open(BytesIO(img_data))
        img.load()
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e
    return img


def image_to_png_bytes(image: Image.Image) -> bytes:
    """Encode a PIL image as PNG."""
    buf = BytesIO()
    image.save(buf, format='PNG')
    return buf.getvalue()
