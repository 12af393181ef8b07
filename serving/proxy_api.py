"""
Forwarding proxy routes.

Relays JSON bodies unchanged to the backend through the shared
BackendClient, which attaches credentials when configured. Upstream
failures come back as ``{"detail": ...}`` with the upstream status;
transport and credential failures, and 2xx replies that are not JSON, come
back as 500.
"""
import json
import logging
from typing import Any
from urllib.parse import quote

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.dependencies import get_backend
from core.constants import BACKEND_PATHS, PROXY_DEFAULT_DETAILS
from core.exceptions import AuthError
from services.backend_client import BackendClient

logger = logging.getLogger("smartlens.proxy")

router = APIRouter(prefix="/api", tags=["proxy"])


async def forward(backend: BackendClient, path: str, body: Any, default_detail: str) -> JSONResponse:
    """
    Forward a JSON body and translate the upstream reply.

    Args:
        backend: Forwarding client
        path: Upstream path
        body: Parsed request JSON
        default_detail: Detail used when upstream gives none

    Returns:
        JSONResponse mirroring the upstream outcome
    """
    try:
        response = await backend.post_json(path, body)
    except (httpx.HTTPError, AuthError) as e:
        logger.error("[proxy] %s error: %s", path, e)
        return JSONResponse(status_code=500, content={"detail": str(e) or "Internal server error"})

    if not response.ok:
        return JSONResponse(
            status_code=response.status_code,
            content={"detail": response.error_detail(default_detail)}
        )
    if response.data is None:
        logger.error("[proxy] %s returned a non-JSON body", path)
        return JSONResponse(status_code=500, content={"detail": default_detail})
    return JSONResponse(status_code=200, content=response.data)


async def _read_json(request: Request):
    try:
        return await request.json(), None
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None, JSONResponse(status_code=400, content={"detail": "Invalid JSON body"})


@router.post("/detect-regions")
async def detect_regions(request: Request, backend: BackendClient = Depends(get_backend)):
    """Forward ``{imageBase64}`` and return ``{regions}``."""
    body, error = await _read_json(request)
    if error:
        return error
    return await forward(
        backend, BACKEND_PATHS['detect_regions'], body, PROXY_DEFAULT_DETAILS['detect_regions']
    )


@router.post("/extract-text")
async def extract_text(request: Request, backend: BackendClient = Depends(get_backend)):
    """Forward ``{imageBase64, regions}`` and return ``{extractedText}``."""
    body, error = await _read_json(request)
    if error:
        return error
    return await forward(
        backend, BACKEND_PATHS['extract_text'], body, PROXY_DEFAULT_DETAILS['extract_text']
    )


@router.post("/users")
async def login_user(request: Request, backend: BackendClient = Depends(get_backend)):
    """Forward ``{email}`` and return the user."""
    body, error = await _read_json(request)
    if error:
        return error
    return await forward(backend, BACKEND_PATHS['users'], body, PROXY_DEFAULT_DETAILS['login'])


@router.post("/users/{user_id}/credits")
async def update_credits(
    user_id: str,
    request: Request,
    backend: BackendClient = Depends(get_backend)
):
    """Forward ``{amount}`` and return the updated user."""
    body, error = await _read_json(request)
    if error:
        return error
    return await forward(
        backend,
        BACKEND_PATHS['credits'].format(user_id=quote(user_id, safe="")),
        body,
        PROXY_DEFAULT_DETAILS['credits']
    )
