"""
Constants and configuration values for the OCR region workflow.
"""
from .models import PricingPlan

# Detector coordinate space (both axes)
COORDINATE_SCALE = 1000

# Credits consumed by one successful extraction
DEFAULT_EXTRACTION_COST = 1

# Credit packs for the mock payment flow
PRICING_PLANS = (
    PricingPlan(id='starter', name='Starter', price='$4.99', credits=10),
    PricingPlan(id='pro', name='Professional', price='$14.99', credits=50, popular=True),
    PricingPlan(id='unlimited', name='Elite', price='$29.99', credits=500),
)

# User-visible error messages
ERROR_MESSAGES = {
    'detection': 'Analysis failed. Ensure image has clear text.',
    'extraction': 'Extraction error. Credits preserved.',
    'credits': 'Failed to update credits',
    'login': 'Login failed',
}

# Default details returned by the forwarding proxy when upstream omits one
PROXY_DEFAULT_DETAILS = {
    'detect_regions': 'Failed to detect regions',
    'extract_text': 'Failed to extract text',
    'login': 'Failed to login',
    'credits': 'Failed to update credits',
}

# Upstream backend endpoints
BACKEND_PATHS = {
    'detect_regions': '/api/detect-regions',
    'extract_text': '/api/extract-text',
    'users': '/api/users',
    'credits': '/api/users/{user_id}/credits',
}

# Header carrying the caller's session token
SESSION_TOKEN_HEADER = 'X-Session-Token'


def get_plan(plan_id: str):
    """Look up a pricing plan by id, or None."""
    for plan in PRICING_PLANS:
        if plan.id == plan_id:
            return plan
    return None
