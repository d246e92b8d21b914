"""Pydantic models for OAuth credentials and cached access tokens."""

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field


class TokenStatus(str, Enum):
    """State of the in-memory access token cache."""

    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"


class DriveCredentials(BaseModel):
    """Long-lived OAuth client credentials plus refresh token.

    Supplied once at configuration time and never persisted.

    Attributes:
        client_id: Google OAuth client ID.
        client_secret: Google OAuth client secret.
        refresh_token: Refresh token granted for the Drive scope.
    """

    client_id: str = Field(..., min_length=1, description="OAuth client ID")
    client_secret: str = Field(..., min_length=1, description="OAuth client secret")
    refresh_token: str = Field(..., min_length=1, description="OAuth refresh token")

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        return f"DriveCredentials(client_id={self.client_id!r})"


class AccessToken(BaseModel):
    """Short-lived bearer token issued by the token endpoint.

    Attributes:
        access_token: Bearer token string.
        expires_at: Actual expiry instant reported by Google (UTC).
        token_type: Always "Bearer" for Google OAuth.
    """

    access_token: str = Field(..., description="Bearer token value")
    expires_at: datetime = Field(..., description="Token expiration time (UTC)")
    token_type: str = Field(default="Bearer", description="Token type")

    def is_expired(self, buffer_seconds: int = 60, now: datetime | None = None) -> bool:
        """Check whether the token is expired or inside the safety margin.

        Args:
            buffer_seconds: Seconds before the real expiry at which the token
                stops being handed out.
            now: Reference time, defaults to the current UTC time.

        Returns:
            True if the token must be refreshed before use.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        return now >= self.expires_at - timedelta(seconds=buffer_seconds)
