"""
Error kinds raised by the workflow core and its collaborators.
"""
from typing import Optional


class SmartLensError(Exception):
    """Base class for all application errors."""


class CollaboratorError(SmartLensError):
    """A remote collaborator call failed. Never retried."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail or message


class DetectionError(CollaboratorError):
    """Region detection failed or returned a malformed payload."""


class ExtractionError(CollaboratorError):
    """Text extraction failed."""


class CreditUpdateError(CollaboratorError):
    """The credit backend rejected or could not apply a balance change."""


class AuthError(CollaboratorError):
    """Login failed or backend credentials could not be obtained."""


class InvalidTransitionError(SmartLensError):
    """An event was raised in a workflow state that does not accept it."""

    def __init__(self, state, event: str):
        state_name = getattr(state, 'value', state)
        super().__init__(f"Cannot handle '{event}' in state {state_name}")
        self.state = state
        self.event = event
