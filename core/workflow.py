"""
Workflow state machine for one document session.

A WorkflowSession owns the image, the region set and the lifecycle state of
a single caller. Asynchronous work (detection, extraction) is started with a
``begin``/``start`` method that returns the session's current generation and
finished with a completion method that must present that same generation.
Reset bumps the generation, so completions that arrive after a reset are
discarded instead of being applied to the new document.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .exceptions import InvalidTransitionError
from .models import TextRegion, User, WorkflowState
from .ordering import move_region, toggle_region
from .request_builder import build_extraction_request, has_active_regions

logger = logging.getLogger("smartlens.workflow")

# States in which the region list can be edited
EDITABLE_STATES = (WorkflowState.INTERACTING, WorkflowState.FINISHED)


class ExtractionGate(str, Enum):
    """Outcome of an extract request before any network call."""
    READY = "ready"
    NO_ACTIVE_REGIONS = "no_active_regions"
    NO_CREDITS = "no_credits"


@dataclass
class ExtractionTicket:
    """Everything an extraction call needs, frozen at request time."""
    generation: int
    image_base64: str
    regions: List[TextRegion]


class WorkflowSession:
    """State machine and document state for one session."""

    def __init__(self, session_id: str = "", user: Optional[User] = None):
        self.session_id = session_id
        self.user = user
        self.state = WorkflowState.IDLE
        self.generation = 0
        self.image_base64: Optional[str] = None
        self.regions: List[TextRegion] = []
        self.selected_id: Optional[str] = None
        self.final_text = ""
        self.error: Optional[str] = None
        self.show_pricing = False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _transition(self, new_state: WorkflowState, event: str):
        logger.info(
            "[session %s] %s: %s -> %s (gen=%d)",
            self.session_id, event, self.state.value, new_state.value, self.generation
        )
        self.state = new_state

    def _require(self, event: str, *states: WorkflowState):
        if self.state not in states:
            raise InvalidTransitionError(self.state, event)

    def _accepts(self, generation: int, event: str, expected: WorkflowState) -> bool:
        """Check that a completion belongs to the live document and state."""
        if generation != self.generation:
            logger.info(
                "[session %s] discarding stale %s (gen=%d, current=%d)",
                self.session_id, event, generation, self.generation
            )
            return False
        if self.state is not expected:
            logger.info(
                "[session %s] discarding %s in state %s",
                self.session_id, event, self.state.value
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Upload and detection
    # ------------------------------------------------------------------

    def start_upload(self) -> int:
        """
        IDLE -> UPLOADING.

        Returns:
            Generation token for the upload/detection completions
        """
        self._require("upload started", WorkflowState.IDLE)
        self.error = None
        self._transition(WorkflowState.UPLOADING, "upload started")
        return self.generation

    def image_decoded(self, generation: int, image_base64: str) -> bool:
        """UPLOADING -> DETECTING_REGIONS."""
        if not self._accepts(generation, "image decoded", WorkflowState.UPLOADING):
            return False
        self.image_base64 = image_base64
        self._transition(WorkflowState.DETECTING_REGIONS, "image decoded")
        return True

    def upload_failed(self, generation: int, message: str) -> bool:
        """UPLOADING -> IDLE when the file cannot be decoded."""
        if not self._accepts(generation, "upload failed", WorkflowState.UPLOADING):
            return False
        self.image_base64 = None
        self.error = message
        self._transition(WorkflowState.IDLE, "upload failed")
        return True

    def detection_succeeded(self, generation: int, regions: Sequence[TextRegion]) -> bool:
        """DETECTING_REGIONS -> INTERACTING. The new set replaces any prior one."""
        if not self._accepts(generation, "detection succeeded", WorkflowState.DETECTING_REGIONS):
            return False
        self.regions = list(regions)
        self.selected_id = None
        self._transition(WorkflowState.INTERACTING, "detection succeeded")
        return True

    def detection_failed(self, generation: int, message: str) -> bool:
        """DETECTING_REGIONS -> IDLE. The image is discarded."""
        if not self._accepts(generation, "detection failed", WorkflowState.DETECTING_REGIONS):
            return False
        self.image_base64 = None
        self.regions = []
        self.error = message
        self._transition(WorkflowState.IDLE, "detection failed")
        return True

    # ------------------------------------------------------------------
    # Region editing
    # ------------------------------------------------------------------

    def move(self, region_id: str, direction) -> List[TextRegion]:
        self._require("move region", *EDITABLE_STATES)
        self.regions = move_region(self.regions, region_id, direction)
        return self.regions

    def toggle(self, region_id: str) -> List[TextRegion]:
        self._require("toggle region", *EDITABLE_STATES)
        self.regions = toggle_region(self.regions, region_id)
        return self.regions

    def select(self, region_id: Optional[str]):
        """Select a region, or clear with None. Unknown ids leave the selection as is."""
        self._require("select region", *EDITABLE_STATES)
        if region_id is None or any(r.id == region_id for r in self.regions):
            self.selected_id = region_id

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    @property
    def can_extract(self) -> bool:
        """Whether the extract control is enabled."""
        return self.state is WorkflowState.INTERACTING and has_active_regions(self.regions)

    def extraction_gate(self, credits: int) -> ExtractionGate:
        """Decide an extract request without changing state."""
        if not has_active_regions(self.regions):
            return ExtractionGate.NO_ACTIVE_REGIONS
        if credits <= 0:
            return ExtractionGate.NO_CREDITS
        return ExtractionGate.READY

    def begin_extraction(self, credits: int) -> Tuple[ExtractionGate, Optional[ExtractionTicket]]:
        """
        Handle an extract request from INTERACTING.

        With no active regions the request is blocked. With no credits the
        refill prompt is raised. In both cases the state stays INTERACTING
        and no ticket is issued.

        Args:
            credits: Caller's current balance as reported by the backend

        Returns:
            (gate, ticket); ticket is set only when gate is READY
        """
        self._require("extract requested", WorkflowState.INTERACTING)
        gate = self.extraction_gate(credits)
        if gate is ExtractionGate.NO_CREDITS:
            self.show_pricing = True
            logger.info("[session %s] extract blocked: no credits", self.session_id)
            return gate, None
        if gate is ExtractionGate.NO_ACTIVE_REGIONS:
            logger.info("[session %s] extract blocked: no active regions", self.session_id)
            return gate, None

        self.error = None
        self._transition(WorkflowState.EXTRACTING, "extract requested")
        ticket = ExtractionTicket(
            generation=self.generation,
            image_base64=self.image_base64 or "",
            regions=build_extraction_request(self.regions)
        )
        return gate, ticket

    def extraction_succeeded(self, generation: int, text: str) -> bool:
        """EXTRACTING -> FINISHED."""
        if not self._accepts(generation, "extraction succeeded", WorkflowState.EXTRACTING):
            return False
        self.final_text = text
        self._transition(WorkflowState.FINISHED, "extraction succeeded")
        return True

    def extraction_failed(self, generation: int, message: str) -> bool:
        """EXTRACTING -> INTERACTING. Credits are left alone."""
        if not self._accepts(generation, "extraction failed", WorkflowState.EXTRACTING):
            return False
        self.error = message
        self._transition(WorkflowState.INTERACTING, "extraction failed")
        return True

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self):
        """Any state -> IDLE. Discards the document and invalidates in-flight calls."""
        self.generation += 1
        self.image_base64 = None
        self.regions = []
        self.selected_id = None
        self.final_text = ""
        self.error = None
        self.show_pricing = False
        if self.state is not WorkflowState.IDLE:
            self._transition(WorkflowState.IDLE, "reset")

    def to_dict(self) -> dict:
        """Snapshot for API responses."""
        return {
            'state': self.state.value,
            'generation': self.generation,
            'regions': [region.to_dict() for region in self.regions],
            'selectedId': self.selected_id,
            'finalText': self.final_text,
            'error': self.error,
            'showPricing': self.show_pricing,
            'canExtract': self.can_extract,
            'user': self.user.to_dict() if self.user else None
        }
