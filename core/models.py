"""
Core domain models for the OCR region workflow.

These are pure data structures without business logic. Mutation of a region
set goes through core.ordering; the workflow lifecycle lives in core.workflow.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class WorkflowState(str, Enum):
    """Lifecycle of one document within a session."""
    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    DETECTING_REGIONS = "DETECTING_REGIONS"
    INTERACTING = "INTERACTING"
    EXTRACTING = "EXTRACTING"
    FINISHED = "FINISHED"


@dataclass(frozen=True)
class BoundingBox:
    """Box edges in the detector's normalized 0-1000 space, origin top-left."""
    ymin: float
    xmin: float
    ymax: float
    xmax: float

    @property
    def width(self) -> float:
        """Calculate width."""
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        """Calculate height."""
        return self.ymax - self.ymin

    @property
    def is_well_formed(self) -> bool:
        """True when both extents are positive. Informational only."""
        return self.xmax > self.xmin and self.ymax > self.ymin

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'ymin': self.ymin,
            'xmin': self.xmin,
            'ymax': self.ymax,
            'xmax': self.xmax
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoundingBox":
        """Build from a detector payload. Raises KeyError/TypeError/ValueError on bad input."""
        return cls(
            ymin=float(data['ymin']),
            xmin=float(data['xmin']),
            ymax=float(data['ymax']),
            xmax=float(data['xmax'])
        )


@dataclass(frozen=True)
class TextRegion:
    """
    One detected text block.

    Regions are immutable values; reordering and toggling produce new
    instances with the same id, so identity survives every edit.
    """
    id: str
    box: BoundingBox
    order: int
    description: str = ""
    is_active: bool = True
    extracted_text: Optional[str] = None

    def with_order(self, order: int) -> "TextRegion":
        return replace(self, order=order)

    def toggled(self) -> "TextRegion":
        return replace(self, is_active=not self.is_active)

    def to_dict(self) -> dict:
        """Convert to the camelCase wire format used by the backend."""
        data = {
            'id': self.id,
            'box': self.box.to_dict(),
            'order': self.order,
            'description': self.description,
            'isActive': self.is_active
        }
        if self.extracted_text is not None:
            data['extractedText'] = self.extracted_text
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], position: int = 1) -> "TextRegion":
        """
        Build a region from a detector payload entry.

        Args:
            data: Region dict with at least ``id`` and ``box``
            position: 1-based index in the response, used when ``order`` is missing

        Raises:
            KeyError, TypeError, ValueError: if the entry is malformed
        """
        return cls(
            id=str(data['id']),
            box=BoundingBox.from_dict(data['box']),
            order=int(data.get('order', position)),
            description=str(data.get('description') or ""),
            is_active=bool(data.get('isActive', True)),
            extracted_text=data.get('extractedText')
        )


@dataclass
class User:
    """Account as reported by the credit backend. Never computed locally."""
    id: str
    email: str
    credits: int = 0
    is_pro: bool = False

    def to_dict(self) -> dict:
        """Convert to the camelCase wire format."""
        return {
            'id': self.id,
            'email': self.email,
            'credits': self.credits,
            'isPro': self.is_pro
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data['id']),
            email=str(data['email']),
            credits=int(data.get('credits', 0)),
            is_pro=bool(data.get('isPro', False))
        )


@dataclass(frozen=True)
class PricingPlan:
    """A credit pack offered by the mock payment flow."""
    id: str
    name: str
    price: str
    credits: int
    popular: bool = False

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'credits': self.credits,
            'popular': self.popular
        }

