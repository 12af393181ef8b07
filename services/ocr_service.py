"""
OCR Service - Region detection and text extraction via the remote backend.

Both calls are all-or-nothing: detection yields a full region set or raises
DetectionError, extraction yields the full text or raises ExtractionError.
"""
import logging
from typing import List, Sequence

import httpx

from core.constants import BACKEND_PATHS, PROXY_DEFAULT_DETAILS
from core.exceptions import AuthError, DetectionError, ExtractionError
from core.models import TextRegion
from core.request_builder import build_extraction_request
from utils.image_utils import strip_data_url
from .backend_client import BackendClient

logger = logging.getLogger("smartlens.ocr")


class OCRService:
    """Client for the detect-regions and extract-text operations."""

    def __init__(self, backend: BackendClient):
        """
        Initialize OCR service.

        Args:
            backend: Forwarding client for the OCR backend
        """
        self.backend = backend

    async def detect_regions(self, image_base64: str) -> List[TextRegion]:
        """
        Detect text regions in an image.

        Args:
            image_base64: Base64 image payload (data URL prefix is stripped)

        Returns:
            Regions in detector order (possibly empty)

        Raises:
            DetectionError: On any failure, including a malformed payload
        """
        payload = {"imageBase64": strip_data_url(image_base64)}
        try:
            response = await self.backend.post_json(BACKEND_PATHS['detect_regions'], payload)
        except (httpx.HTTPError, AuthError) as e:
            logger.warning("Region detection request failed: %s", e)
            raise DetectionError(str(e)) from e

        if not response.ok:
            detail = response.error_detail(PROXY_DEFAULT_DETAILS['detect_regions'])
            raise DetectionError(detail, status_code=response.status_code)

        data = response.data
        raw_regions = data.get('regions') if isinstance(data, dict) else None
        if not isinstance(raw_regions, list):
            raise DetectionError("Malformed detection response: missing 'regions' list")

        try:
            regions = [
                TextRegion.from_dict(item, position=index + 1)
                for index, item in enumerate(raw_regions)
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DetectionError(f"Malformed region in detection response: {e}") from e

        malformed = [region.id for region in regions if not region.box.is_well_formed]
        if malformed:
            # Kept as-is; the detector owns the geometry
            logger.warning("Detector returned %d degenerate boxes: %s", len(malformed), malformed)
        logger.info("Detected %d regions", len(regions))
        return regions

    async def extract_text(self, image_base64: str, regions: Sequence[TextRegion]) -> str:
        """
        Extract text from the active regions in order.

        Args:
            image_base64: Base64 image payload
            regions: Region set; filtered to active and sorted by order

        Returns:
            Extracted text. Empty without contacting the backend when no
            region is active.

        Raises:
            ExtractionError: On any failure
        """
        ordered = build_extraction_request(regions)
        if not ordered:
            return ""

        payload = {
            "imageBase64": strip_data_url(image_base64),
            "regions": [region.to_dict() for region in ordered]
        }
        try:
            response = await self.backend.post_json(BACKEND_PATHS['extract_text'], payload)
        except (httpx.HTTPError, AuthError) as e:
            logger.warning("Text extraction request failed: %s", e)
            raise ExtractionError(str(e)) from e

        if not response.ok:
            detail = response.error_detail(PROXY_DEFAULT_DETAILS['extract_text'])
            raise ExtractionError(detail, status_code=response.status_code)

        data = response.data
        text = data.get('extractedText') if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise ExtractionError("Malformed extraction response: missing 'extractedText'")

        logger.info("Extracted %d chars from %d regions", len(text), len(ordered))
        return text
