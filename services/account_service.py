"""
Account Service - Login and credit bookkeeping via the remote backend.

The backend owns balances. This service never computes a balance; it only
relays deltas and returns the user the backend reports.
"""
import logging

import httpx

from core.constants import BACKEND_PATHS, PROXY_DEFAULT_DETAILS
from core.exceptions import AuthError, CreditUpdateError
from core.models import User
from .backend_client import BackendClient

logger = logging.getLogger("smartlens.accounts")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AccountService:
    """Client for the users and credits endpoints."""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def login(self, email: str) -> User:
        """
        Log in (or register) by email.

        Raises:
            ValueError: If the email is empty
            AuthError: If the backend rejects the login or cannot be reached
        """
        email = normalize_email(email)
        if not email:
            raise ValueError("Email is required")

        try:
            response = await self.backend.post_json(BACKEND_PATHS['users'], {"email": email})
        except httpx.HTTPError as e:
            raise AuthError(f"Login failed: {e}") from e

        if not response.ok:
            raise AuthError(
                f"Login failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                detail=response.error_detail(PROXY_DEFAULT_DETAILS['login'])
            )
        user = self._parse_user(response.data, AuthError)
        logger.info("Login successful: user=%s credits=%d", user.id, user.credits)
        return user

    async def update_credits(self, user_id: str, delta: int) -> User:
        """
        Apply a credit delta.

        Args:
            user_id: Backend user id
            delta: Signed amount (-1 per extraction, plan credits on purchase)

        Returns:
            User as reported by the backend after the update

        Raises:
            CreditUpdateError: On any failure
        """
        path = BACKEND_PATHS['credits'].format(user_id=user_id)
        try:
            response = await self.backend.post_json(path, {"amount": delta})
        except (httpx.HTTPError, AuthError) as e:
            logger.warning("Credit update request failed: %s", e)
            raise CreditUpdateError(str(e)) from e

        if not response.ok:
            detail = response.error_detail(PROXY_DEFAULT_DETAILS['credits'])
            raise CreditUpdateError(detail, status_code=response.status_code)

        user = self._parse_user(response.data, CreditUpdateError)
        logger.info("Credits updated: user=%s delta=%+d balance=%d", user.id, delta, user.credits)
        return user

    @staticmethod
    def _parse_user(data, error_cls) -> User:
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise error_cls(f"Malformed user payload: {e}") from e
