"""
Credential providers for the forwarding client.

The backend may be reached with no authentication, a static bearer token,
or a Google-issued OIDC ID token (Cloud Run service-to-service auth). The
provider is injected into BackendClient so there is one forwarding path
regardless of how requests are authenticated.
"""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional

from core.exceptions import AuthError

logger = logging.getLogger("smartlens.auth")

# Google ID tokens live for one hour
ID_TOKEN_REFRESH_SECONDS = 50 * 60


class CredentialProvider(ABC):
    """Supplies headers to attach to every upstream request."""

    @abstractmethod
    async def get_headers(self) -> Dict[str, str]:
        """
        Return authentication headers.

        Raises:
            AuthError: If credentials cannot be obtained
        """
        pass


class NoCredentials(CredentialProvider):
    """Plain forwarding."""

    async def get_headers(self) -> Dict[str, str]:
        return {}


class StaticTokenCredentials(CredentialProvider):
    """Attach a fixed bearer token."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("StaticTokenCredentials requires a non-empty token")
        self.token = token

    async def get_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class GoogleIdTokenCredentials(CredentialProvider):
    """
    Attach a Google OIDC ID token minted for the backend audience.

    Uses Application Default Credentials through google-auth. Tokens are
    cached and refreshed before they expire.
    """

    def __init__(self, audience: str):
        self.audience = audience
        self._token: Optional[str] = None
        self._fetched_at = 0.0

    def _fetch_token(self) -> str:
        import google.auth.exceptions
        import google.auth.transport.requests
        import google.oauth2.id_token

        try:
            request = google.auth.transport.requests.Request()
            return google.oauth2.id_token.fetch_id_token(request, self.audience)
        except google.auth.exceptions.GoogleAuthError as e:
            logger.error("Failed to fetch ID token for %s: %s", self.audience, e)
            raise AuthError("Failed to authenticate with backend service") from e

    async def get_headers(self) -> Dict[str, str]:
        now = time.monotonic()
        if self._token is None or now - self._fetched_at > ID_TOKEN_REFRESH_SECONDS:
            # fetch_id_token does blocking I/O
            self._token = await asyncio.to_thread(self._fetch_token)
            self._fetched_at = now
        return {"Authorization": f"Bearer {self._token}"}


def create_credential_provider(settings) -> CredentialProvider:
    """
    Create the credential provider configured by BACKEND_AUTH_MODE.

    Args:
        settings: Settings instance

    Returns:
        Configured CredentialProvider

    Raises:
        ValueError: If the mode is unknown or its options are missing
    """
    mode = settings.get_auth_mode()
    if mode == "static":
        return StaticTokenCredentials(settings.backend_token or "")
    if mode == "google":
        return GoogleIdTokenCredentials(settings.backend_audience or settings.backend_url)
    return NoCredentials()
