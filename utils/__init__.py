"""Utilities package - Helper functions for image decoding and region overlays."""

from .image_utils import (
    ImageDecodeError,
    strip_data_url,
    decode_upload,
    decode_base64_image,
    image_to_png_bytes
)

from .bbox_utils import (
    denormalize_box,
    badge_origin,
    overlay_items,
    draw_region_overlay
)

__all__ = [
    # Image utils
    'ImageDecodeError',
    'strip_data_url',
    'decode_upload',
    'decode_base64_image',
    'image_to_png_bytes',

    # BBox utils
    'denormalize_box',
    'badge_origin',
    'overlay_items',
    'draw_region_overlay'
]
