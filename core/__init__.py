"""Core package - Region model, ordering, workflow state machine."""

from .models import (
    BoundingBox,
    TextRegion,
    User,
    PricingPlan,
    WorkflowState
)
from .constants import (
    COORDINATE_SCALE,
    DEFAULT_EXTRACTION_COST,
    PRICING_PLANS,
    ERROR_MESSAGES,
    get_plan
)
from .exceptions import (
    SmartLensError,
    CollaboratorError,
    DetectionError,
    ExtractionError,
    CreditUpdateError,
    AuthError,
    InvalidTransitionError
)
from .ordering import Direction, move_region, toggle_region, renumber, is_dense
from .request_builder import build_extraction_request, has_active_regions
from .workflow import WorkflowSession, ExtractionGate, ExtractionTicket

__all__ = [
    'BoundingBox',
    'TextRegion',
    'User',
    'PricingPlan',
    'WorkflowState',
    'COORDINATE_SCALE',
    'DEFAULT_EXTRACTION_COST',
    'PRICING_PLANS',
    'ERROR_MESSAGES',
    'get_plan',
    'SmartLensError',
    'CollaboratorError',
    'DetectionError',
    'ExtractionError',
    'CreditUpdateError',
    'AuthError',
    'InvalidTransitionError',
    'Direction',
    'move_region',
    'toggle_region',
    'renumber',
    'is_dense',
    'build_extraction_request',
    'has_active_regions',
    'WorkflowSession',
    'ExtractionGate',
    'ExtractionTicket'
]
