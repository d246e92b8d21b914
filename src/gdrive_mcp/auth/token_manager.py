"""In-memory access token cache backed by the OAuth refresh-token grant.

The cache lives on the TokenManager instance, one per DriveClient. Nothing
is written to disk: a restarted process simply refreshes again.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

import httpx

from gdrive_mcp.auth.models import AccessToken, DriveCredentials, TokenStatus
from gdrive_mcp.errors import AuthError

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"

# Tokens stop being handed out this many seconds before their real expiry
EXPIRY_MARGIN_SECONDS = 60


class TokenManager:
    """Produces valid bearer tokens on demand.

    A cached token is returned without any network call while it is outside
    the expiry margin. Otherwise the refresh token is exchanged for a new
    access token. Refreshes are single-flight: concurrent callers wait on one
    lock and the cache is re-checked once it is held, so at most one refresh
    is in flight per manager.

    Attributes:
        credentials: Client credentials and refresh token.
    """

    def __init__(
        self,
        credentials: DriveCredentials,
        http_client: Callable[[], Awaitable[httpx.AsyncClient]],
    ) -> None:
        """Initialize the token manager.

        Args:
            credentials: OAuth credentials to exchange.
            http_client: Coroutine function returning the shared HTTP client.
        """
        self.credentials = credentials
        self._get_http_client = http_client
        self._token: AccessToken | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def cached_token(self) -> AccessToken | None:
        """The currently cached token, if any."""
        return self._token

    @property
    def status(self) -> TokenStatus:
        """Status of the cached token."""
        if self._token is None:
            return TokenStatus.MISSING
        if self._token.is_expired(EXPIRY_MARGIN_SECONDS):
            return TokenStatus.EXPIRED
        return TokenStatus.VALID

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes."""
        self._token = None

    async def get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Returns:
            Bearer token string.

        Raises:
            AuthError: If the token endpoint rejects the refresh.
        """
        token = self._token
        if token is not None and not token.is_expired(EXPIRY_MARGIN_SECONDS):
            return token.access_token

        async with self._refresh_lock:
            # Another waiter may have refreshed while we were blocked
            token = self._token
            if token is not None and not token.is_expired(EXPIRY_MARGIN_SECONDS):
                return token.access_token

            token = await self._refresh()
            self._token = token
            return token.access_token

    async def _refresh(self) -> AccessToken:
        """Exchange the refresh token for a new access token.

        Returns:
            Newly issued AccessToken.

        Raises:
            AuthError: If the token endpoint returns a non-success status or a
                response without a usable token.
        """
        logger.info("Refreshing Google OAuth access token")
        client = await self._get_http_client()

        response = await client.post(
            TOKEN_URI,
            data={
                "client_id": self.credentials.client_id,
                "client_secret": self.credentials.client_secret,
                "refresh_token": self.credentials.refresh_token,
                "grant_type": "refresh_token",
            },
        )
        if response.is_error:
            logger.warning(f"Token refresh rejected with status {response.status_code}")
            raise AuthError(response.status_code, response.text)

        issued_at = datetime.now(timezone.utc)
        try:
            data = response.json()
            return AccessToken(  # nosec B106 - "Bearer" is OAuth token type, not a password
                access_token=data["access_token"],
                expires_at=issued_at + timedelta(seconds=data["expires_in"]),
                token_type="Bearer",
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Unusable token response: {e}")
            raise AuthError(response.status_code, response.text) from e
