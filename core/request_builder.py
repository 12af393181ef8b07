"""
Builds the extraction payload from the live region set.
"""
from typing import List, Sequence

from .models import TextRegion


def build_extraction_request(regions: Sequence[TextRegion]) -> List[TextRegion]:
    """
    Select the regions to send for text extraction.

    Args:
        regions: Full region set in any order

    Returns:
        Active regions sorted ascending by ``order``. An empty list means
        the extraction call must be skipped.
    """
    active = [region for region in regions if region.is_active]
    return sorted(active, key=lambda region: region.order)


def has_active_regions(regions: Sequence[TextRegion]) -> bool:
    """True if at least one region would be submitted."""
    return any(region.is_active for region in regions)
