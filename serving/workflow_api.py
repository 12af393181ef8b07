"""
Workflow API for the upload -> detect -> edit -> extract lifecycle.

Provides endpoints for:
- Email login/logout and the current user
- Pricing plans and mock purchases
- Uploading an image, editing regions, and extracting text

Session routes identify the caller by the X-Session-Token header.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from api.dependencies import get_controller, get_session
from api.schemas import (
    ExtractionRequestPreview,
    ExtractResponse,
    LoginRequest,
    LoginResponse,
    MoveRequest,
    PricingPlanResponse,
    PurchaseRequest,
    SessionSnapshot,
    UserResponse
)
from core.constants import ERROR_MESSAGES, PRICING_PLANS
from core.exceptions import AuthError, CreditUpdateError
from core.ordering import Direction
from core.request_builder import build_extraction_request
from core.workflow import WorkflowSession
from services.workflow_service import WorkflowController
from utils.bbox_utils import draw_region_overlay, overlay_items
from utils.image_utils import decode_base64_image, image_to_png_bytes

logger = logging.getLogger("smartlens.api")

router = APIRouter()


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

@router.post("/auth/login", response_model=LoginResponse, tags=["auth"])
async def login(
    payload: LoginRequest,
    controller: WorkflowController = Depends(get_controller)
):
    """
    Log in by email.

    Returns:
        Session token and user; pass the token as X-Session-Token afterwards
    """
    try:
        session = await controller.login(payload.email)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AuthError as e:
        logger.warning("Login failed: %s", e)
        raise HTTPException(status_code=502, detail=f"{ERROR_MESSAGES['login']}: {e.detail}")
    return {"token": session.session_id, "user": session.user.to_dict()}


@router.post("/auth/logout", tags=["auth"])
async def logout(
    session: WorkflowSession = Depends(get_session),
    controller: WorkflowController = Depends(get_controller)
):
    controller.logout(session)
    return {"status": "logged_out"}


@router.get("/auth/me", response_model=UserResponse, tags=["auth"])
async def me(session: WorkflowSession = Depends(get_session)):
    if session.user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return session.user.to_dict()


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------

@router.get("/pricing/plans", response_model=List[PricingPlanResponse], tags=["pricing"])
async def list_plans():
    return [plan.to_dict() for plan in PRICING_PLANS]


@router.post("/pricing/purchase", response_model=SessionSnapshot, tags=["pricing"])
async def purchase(
    payload: PurchaseRequest,
    session: WorkflowSession = Depends(get_session),
    controller: WorkflowController = Depends(get_controller)
):
    """Mock payment: credit the plan and close the refill prompt."""
    try:
        await controller.purchase(session, payload.plan_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except CreditUpdateError as e:
        raise HTTPException(status_code=502, detail=e.detail)
    return session.to_dict()


@router.post("/pricing/dismiss", response_model=SessionSnapshot, tags=["pricing"])
async def dismiss_pricing(session: WorkflowSession = Depends(get_session)):
    session.show_pricing = False
    return session.to_dict()


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------

@router.get("/workflow", response_model=SessionSnapshot, tags=["workflow"])
async def get_workflow(session: WorkflowSession = Depends(get_session)):
    return session.to_dict()


@router.post("/workflow/upload", response_model=SessionSnapshot, tags=["workflow"])
async def upload(
    file: UploadFile = File(...),
    session: WorkflowSession = Depends(get_session),
    controller: WorkflowController = Depends(get_controller)
):
    """
    Upload an image and detect its regions.

    Detection failures are reported in the snapshot's ``error`` with the
    state back at IDLE.
    """
    content = await file.read()
    await controller.upload(session, content)
    return session.to_dict()


@router.post("/workflow/regions/{region_id}/move", response_model=SessionSnapshot, tags=["workflow"])
async def move_region(
    region_id: str,
    payload: MoveRequest,
    session: WorkflowSession = Depends(get_session)
):
    try:
        direction = Direction.parse(payload.direction)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    session.move(region_id, direction)
    return session.to_dict()


@router.post("/workflow/regions/{region_id}/toggle", response_model=SessionSnapshot, tags=["workflow"])
async def toggle_region(region_id: str, session: WorkflowSession = Depends(get_session)):
    session.toggle(region_id)
    return session.to_dict()


@router.post("/workflow/regions/{region_id}/select", response_model=SessionSnapshot, tags=["workflow"])
async def select_region(region_id: str, session: WorkflowSession = Depends(get_session)):
    session.select(region_id)
    return session.to_dict()


@router.get("/workflow/extraction-request", response_model=ExtractionRequestPreview, tags=["workflow"])
async def preview_extraction_request(session: WorkflowSession = Depends(get_session)):
    """The ordered active regions the next extraction would submit."""
    return {"regions": [r.to_dict() for r in build_extraction_request(session.regions)]}


@router.post("/workflow/extract", response_model=ExtractResponse, tags=["workflow"])
async def extract(
    session: WorkflowSession = Depends(get_session),
    controller: WorkflowController = Depends(get_controller)
):
    """
    Extract text with credits.

    ``gate`` is 'ready' when the backend was called, 'no_credits' when the
    refill prompt was raised, 'no_active_regions' when nothing is selected.
    """
    gate = await controller.extract(session)
    return {**session.to_dict(), "gate": gate.value}


@router.post("/workflow/reset", response_model=SessionSnapshot, tags=["workflow"])
async def reset(session: WorkflowSession = Depends(get_session)):
    session.reset()
    return session.to_dict()


@router.get("/workflow/overlay", tags=["workflow"])
async def get_overlay(session: WorkflowSession = Depends(get_session)):
    """Overlay shapes: active regions with order badges."""
    return overlay_items(session.regions, session.selected_id)


@router.get("/workflow/overlay.png", tags=["workflow"])
async def get_overlay_image(session: WorkflowSession = Depends(get_session)):
    """The uploaded image with the region overlay drawn on it."""
    if not session.image_base64:
        raise HTTPException(status_code=404, detail="No image uploaded")
    image = decode_base64_image(session.image_base64)
    annotated = draw_region_overlay(image, session.regions, session.selected_id)
    return Response(content=image_to_png_bytes(annotated), media_type="image/png")
