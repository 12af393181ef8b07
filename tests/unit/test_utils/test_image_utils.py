"""
Unit tests for utils.image_utils module.
"""
import base64

import pytest
from PIL import Image
from utils.image_utils import (
    ImageDecodeError,
    decode_base64_image,
    decode_upload,
    image_to_png_bytes,
    strip_data_url,
)


class TestStripDataUrl:
    """Tests for strip_data_url."""

    def test_data_url(self):
        assert strip_data_url('data:image/png;base64,AAAA') == 'AAAA'

    def test_plain_base64(self):
        assert strip_data_url('AAAA') == 'AAAA'


class TestDecodeUpload:
    """Tests for decode_upload."""

    def test_valid_png(self, sample_png_bytes):
        """Test bytes are forwarded untouched as base64."""
        b64, size = decode_upload(sample_png_bytes)

        assert size == (200, 100)
        assert base64.b64decode(b64) == sample_png_bytes

    def test_empty(self):
        with pytest.raises(ImageDecodeError):
            decode_upload(b'')

    def test_not_an_image(self):
        """Test text content is rejected."""
        with pytest.raises(ImageDecodeError):
            decode_upload(b'definitely not an image')

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_upload(b'')


class TestDecodeBase64Image:
    """Tests for decode_base64_image."""

    def test_round_trip(self, sample_base64_image):
        img = decode_base64_image(sample_base64_image)

        assert img.size == (200, 100)

    def test_data_url_accepted(self, sample_base64_image):
        img = decode_base64_image(f"data:image/png;base64,{sample_base64_image}")

        assert img.size == (200, 100)

    def test_invalid_base64(self):
        with pytest.raises(ImageDecodeError):
            decode_base64_image('***not base64***')

    def test_valid_base64_not_image(self):
        with pytest.raises(ImageDecodeError):
            decode_base64_image(base64.b64encode(b'hello').decode())


class TestImageToPngBytes:
    """Tests for image_to_png_bytes."""

    def test_png_signature(self):
        data = image_to_png_bytes(Image.new('RGB', (5, 5)))

        assert data.startswith(b'\x89PNG')
