"""
Ordering engine for detected regions.

Keeps the dense 1..N ``order`` invariant across directional moves. Every
function returns a new list and leaves its input untouched.
"""
from enum import Enum
from typing import List, Sequence

from .models import TextRegion


class Direction(str, Enum):
    """Direction of a single-step move."""
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value) -> "Direction":
        """
        Parse a direction from a string (case-insensitive) or Direction.

        Raises:
            ValueError: if the value is not 'up' or 'down'
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid direction: {value!r} (expected 'up' or 'down')")


def renumber(regions: Sequence[TextRegion]) -> List[TextRegion]:
    """Assign each region its 1-based position as ``order``."""
    return [region.with_order(index + 1) for index, region in enumerate(regions)]


def is_dense(regions: Sequence[TextRegion]) -> bool:
    """Check that order values are exactly {1..N}, each once."""
    orders = sorted(region.order for region in regions)
    return orders == list(range(1, len(regions) + 1))


def move_region(
    regions: Sequence[TextRegion],
    region_id: str,
    direction
) -> List[TextRegion]:
    """
    Swap a region with its neighbour and renumber the whole set.

    Inactive regions move and block moves exactly like active ones.

    Args:
        regions: Current region sequence
        region_id: Id of the region to move
        direction: Direction or 'up'/'down'

    Returns:
        New region list. Unchanged (same ids, same order) when the id is
        absent or the target slot does not exist.
    """
    direction = Direction.parse(direction)
    items = list(regions)

    index = next((i for i, r in enumerate(items) if r.id == region_id), -1)
    if index == -1:
        return items

    target = index - 1 if direction is Direction.UP else index + 1
    if target < 0 or target >= len(items):
        return items

    items[index], items[target] = items[target], items[index]
    return renumber(items)


def toggle_region(regions: Sequence[TextRegion], region_id: str) -> List[TextRegion]:
    """Flip ``is_active`` on the matching region only. No-op if absent."""
    return [r.toggled() if r.id == region_id else r for r in regions]
