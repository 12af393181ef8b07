"""
Forwarding client for the remote OCR/credit backend.

Wraps an httpx.AsyncClient and attaches headers from an injected
CredentialProvider. Callers receive the upstream status and body and decide
how to map failures; transport errors propagate as httpx.HTTPError.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .credentials import CredentialProvider, NoCredentials

logger = logging.getLogger("smartlens.backend")


@dataclass
class BackendResponse:
    """Upstream reply. ``data`` is None when the body is not JSON."""
    status_code: int
    data: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def error_detail(self, default: str) -> str:
        """The upstream ``detail`` field, or ``default`` when absent."""
        if isinstance(self.data, dict) and self.data.get('detail'):
            return str(self.data['detail'])
        return default


class BackendClient:
    """Single forwarding path to the backend, with optional authentication."""

    def __init__(
        self,
        base_url: str,
        credentials: Optional[CredentialProvider] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize backend client.

        Args:
            base_url: Backend base URL
            credentials: Credential provider (default: none)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip('/')
        self.credentials = credentials or NoCredentials()
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport
        )

    async def post_json(self, path: str, payload: Any) -> BackendResponse:
        """
        POST a JSON body upstream.

        Args:
            path: Path relative to the base URL
            payload: JSON-serializable body

        Returns:
            BackendResponse with the upstream status and parsed body

        Raises:
            httpx.HTTPError: On transport failures (connect, timeout, ...)
            AuthError: If credentials cannot be obtained
        """
        headers = {"Content-Type": "application/json"}
        headers.update(await self.credentials.get_headers())

        response = await self.client.post(path, json=payload, headers=headers)
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None

        if response.is_success:
            logger.debug("POST %s -> %d", path, response.status_code)
        else:
            logger.warning("POST %s -> %d body=%r", path, response.status_code, response.text[:200])
        return BackendResponse(status_code=response.status_code, data=data, text=response.text)

    async def aclose(self):
        await self.client.aclose()
