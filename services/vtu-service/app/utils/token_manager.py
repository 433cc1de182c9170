"""
eBills Token Manager
Single-slot bearer token cache for the bill-payment provider
"""

import asyncio
from typing import Optional

import httpx
import structlog

from .errors import AuthenticationError, TransportError

logger = structlog.get_logger(__name__)


class TokenManager:
    """
    Holds at most one eBills bearer token.

    The token is fetched lazily on first use and then reused for the life of
    the process. Expiry is never inspected; callers drop a rejected token with
    invalidate() so the next request authenticates again.
    """

    def __init__(self, client: httpx.AsyncClient, auth_url: str, username: str, password: str):
        self._client = client
        self.auth_url = auth_url
        self.username = username
        self.password = password
        self._token: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[str]:
        return self._token

    async def ensure_token(self) -> str:
        """Return the cached token, authenticating first if there is none"""
        if self._token:
            return self._token

        async with self._lock:
            # Another request may have authenticated while we waited
            if self._token:
                return self._token
            self._token = await self._authenticate()
            return self._token

    async def refresh(self) -> str:
        """Authenticate unconditionally and replace the cached token"""
        async with self._lock:
            self._token = await self._authenticate()
            return self._token

    def invalidate(self) -> None:
        if self._token:
            logger.info("Dropping cached eBills token")
        self._token = None

    async def _authenticate(self) -> str:
        logger.info("Authenticating with eBills", auth_url=self.auth_url)

        try:
            response = await self._client.post(
                self.auth_url,
                json={"username": self.username, "password": self.password},
                headers={"Content-Type": "application/json"}
            )
        except httpx.HTTPError as e:
            logger.error("eBills auth request failed", error=str(e))
            raise TransportError(f"eBills auth request failed: {e}") from e

        if not response.is_success:
            logger.error("eBills auth rejected", status_code=response.status_code)
            raise AuthenticationError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError("eBills auth returned a non-JSON body") from e

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError(response.status_code, "Auth response did not contain a token")

        logger.info("eBills token acquired")
        return token
