"""
Pydantic schemas for API request/response validation.

Wire keys are camelCase to match the browser client and the backend.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    """Request body for email login."""
    email: str


class MoveRequest(BaseModel):
    """Request body for moving a region one step."""
    direction: str = Field(description="'up' or 'down'")


class PurchaseRequest(CamelModel):
    """Request body for the mock payment flow."""
    plan_id: str = Field(alias="planId")


class UserResponse(CamelModel):
    id: str
    email: str
    credits: int
    is_pro: bool = Field(alias="isPro")


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class PricingPlanResponse(BaseModel):
    id: str
    name: str
    price: str
    credits: int
    popular: bool = False


class BoundingBoxResponse(BaseModel):
    ymin: float
    xmin: float
    ymax: float
    xmax: float


class RegionResponse(CamelModel):
    id: str
    box: BoundingBoxResponse
    order: int
    description: str = ""
    is_active: bool = Field(alias="isActive")
    extracted_text: Optional[str] = Field(default=None, alias="extractedText")


class SessionSnapshot(CamelModel):
    """Full workflow state of a session."""
    state: str
    generation: int
    regions: List[RegionResponse]
    selected_id: Optional[str] = Field(default=None, alias="selectedId")
    final_text: str = Field(default="", alias="finalText")
    error: Optional[str] = None
    show_pricing: bool = Field(default=False, alias="showPricing")
    can_extract: bool = Field(default=False, alias="canExtract")
    user: Optional[UserResponse] = None


class ExtractResponse(SessionSnapshot):
    """Snapshot plus how the extract request was gated."""
    gate: str


class ExtractionRequestPreview(BaseModel):
    regions: List[RegionResponse]
