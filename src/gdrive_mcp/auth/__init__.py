"""OAuth authentication for the Google Drive MCP server.

Quick Start:
    ```python
    from gdrive_mcp.auth import DriveCredentials, TokenManager

    credentials = DriveCredentials(
        client_id="your-client-id",
        client_secret="your-client-secret",  # pragma: allowlist secret
        refresh_token="your-refresh-token",
    )
    ```

Access tokens are cached in memory only and refreshed 60 seconds before
they expire.
"""

from gdrive_mcp.auth.models import AccessToken, DriveCredentials, TokenStatus
from gdrive_mcp.auth.token_manager import EXPIRY_MARGIN_SECONDS, TOKEN_URI, TokenManager

__all__ = [
    "AccessToken",
    "DriveCredentials",
    "TokenManager",
    "TokenStatus",
    "EXPIRY_MARGIN_SECONDS",
    "TOKEN_URI",
]
