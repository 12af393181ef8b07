"""
API Dependencies - Dependency injection for FastAPI.

Every component lives on ``app.state`` and is created by the application
factory, so there is no module-level mutable state.
"""
from typing import Optional

from fastapi import Header, HTTPException, Request

from core.constants import SESSION_TOKEN_HEADER
from core.workflow import WorkflowSession
from services.backend_client import BackendClient
from services.workflow_service import WorkflowController


def get_backend(request: Request) -> BackendClient:
    """Forwarding client used by the proxy routes."""
    return request.app.state.backend


def get_controller(request: Request) -> WorkflowController:
    return request.app.state.controller


def get_session(
    request: Request,
    session_token: Optional[str] = Header(default=None, alias=SESSION_TOKEN_HEADER)
) -> WorkflowSession:
    """
    Resolve the caller's workflow session from the X-Session-Token header.

    Raises:
        HTTPException: 401 if the token is missing or unknown
    """
    session = request.app.state.store.get(session_token)
    if session is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return session
