"""
Workflow controller.

Drives a WorkflowSession through its remote calls: upload and detection,
extraction with credit debit, purchases, login and logout. The session's
state machine decides what is legal; this module performs the I/O and feeds
completions back with the generation token captured when the call started.
"""
import logging

from core.constants import DEFAULT_EXTRACTION_COST, ERROR_MESSAGES, get_plan
from core.exceptions import (
    AuthError,
    CreditUpdateError,
    DetectionError,
    ExtractionError
)
from core.models import User
from core.workflow import ExtractionGate, WorkflowSession
from utils.image_utils import ImageDecodeError, decode_upload
from .account_service import AccountService
from .ocr_service import OCRService
from .session_store import SessionStore

logger = logging.getLogger("smartlens.workflow")


class WorkflowController:
    """Orchestrates collaborator calls for workflow sessions."""

    def __init__(
        self,
        ocr: OCRService,
        accounts: AccountService,
        store: SessionStore,
        extraction_cost: int = DEFAULT_EXTRACTION_COST
    ):
        """
        Initialize controller.

        Args:
            ocr: Detection/extraction collaborator
            accounts: Login/credit collaborator
            store: Session registry with user-record persistence
            extraction_cost: Credits debited per successful extraction
        """
        self.ocr = ocr
        self.accounts = accounts
        self.store = store
        self.extraction_cost = extraction_cost

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    async def login(self, email: str) -> WorkflowSession:
        """
        Log in by email and open a session.

        Raises:
            ValueError: If the email is empty
            AuthError: If the backend rejects the login
        """
        user = await self.accounts.login(email)
        return self.store.create(user)

    def logout(self, session: WorkflowSession):
        """Reset the document and forget the session and its user record."""
        session.reset()
        self.store.remove(session.session_id)
        logger.info("[session %s] logged out", session.session_id)

    def _apply_user(self, session: WorkflowSession, user: User) -> bool:
        """Store the backend's user view unless the session was logged out meanwhile."""
        if not self.store.contains(session.session_id):
            logger.info(
                "[session %s] discarding user update for logged-out session",
                session.session_id
            )
            return False
        session.user = user
        self.store.save_user(session)
        return True

    # ------------------------------------------------------------------
    # Upload and detection
    # ------------------------------------------------------------------

    async def upload(self, session: WorkflowSession, content: bytes) -> WorkflowSession:
        """
        Upload an image and detect its regions.

        Decode and detection failures return the session to IDLE with a
        user-visible error rather than raising.

        Raises:
            InvalidTransitionError: If the session is not IDLE
        """
        generation = session.start_upload()

        try:
            image_base64, size = decode_upload(content)
        except ImageDecodeError as e:
            logger.warning("[session %s] upload rejected: %s", session.session_id, e)
            session.upload_failed(generation, ERROR_MESSAGES['detection'])
            return session

        logger.info("[session %s] decoded %dx%d image", session.session_id, *size)
        if not session.image_decoded(generation, image_base64):
            return session

        try:
            regions = await self.ocr.detect_regions(image_base64)
        except DetectionError as e:
            logger.warning("[session %s] detection failed: %s", session.session_id, e)
            session.detection_failed(generation, ERROR_MESSAGES['detection'])
            return session

        session.detection_succeeded(generation, regions)
        return session

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def extract(self, session: WorkflowSession) -> ExtractionGate:
        """
        Extract text for the session's active regions and debit one use.

        The debit happens only after the extraction result has been applied,
        so a failed extraction never costs credits. A debit failure keeps
        the result and surfaces the credit error.

        Returns:
            The extraction gate; anything but READY means no call was made

        Raises:
            AuthError: If the session has no user
            InvalidTransitionError: If the session is not INTERACTING
        """
        if session.user is None:
            raise AuthError("Not logged in")

        gate, ticket = session.begin_extraction(session.user.credits)
        if ticket is None:
            return gate

        try:
            text = await self.ocr.extract_text(ticket.image_base64, ticket.regions)
        except ExtractionError as e:
            logger.warning("[session %s] extraction failed: %s", session.session_id, e)
            session.extraction_failed(ticket.generation, ERROR_MESSAGES['extraction'])
            return gate

        # Stale results are dropped without a debit
        if not session.extraction_succeeded(ticket.generation, text):
            return gate

        try:
            user = await self.accounts.update_credits(session.user.id, -self.extraction_cost)
        except CreditUpdateError as e:
            logger.warning("[session %s] credit debit failed: %s", session.session_id, e)
            session.error = ERROR_MESSAGES['credits']
        else:
            self._apply_user(session, user)
        return gate

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    async def purchase(self, session: WorkflowSession, plan_id: str) -> User:
        """
        Mock purchase: credit the plan's amount and close the refill prompt.

        Raises:
            ValueError: If the plan id is unknown
            AuthError: If the session has no user
            CreditUpdateError: If the backend rejects the update
        """
        plan = get_plan(plan_id)
        if plan is None:
            raise ValueError(f"Unknown plan: {plan_id!r}")
        if session.user is None:
            raise AuthError("Not logged in")

        try:
            user = await self.accounts.update_credits(session.user.id, plan.credits)
        except CreditUpdateError:
            session.error = ERROR_MESSAGES['credits']
            raise

        if self._apply_user(session, user):
            session.show_pricing = False
        logger.info("[session %s] purchased plan=%s", session.session_id, plan.id)
        return user
