"""Interactive consent flow for obtaining a Drive refresh token.

Runs once on a developer machine. The resulting refresh token is printed
for the user to export; it is never stored by gdrive-mcp.
"""

import asyncio

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gdrive_mcp.auth.token_manager import TOKEN_URI
from gdrive_mcp.errors import ConfigurationError

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]

DEFAULT_CONSENT_PORT = 8080


def _run_consent_flow(client_config: dict, scopes: list[str], port: int) -> Credentials:
    """Run the installed-app flow (blocking).

    Opens the browser for authorization and serves the redirect locally.

    Args:
        client_config: Google OAuth client configuration (installed type).
        scopes: OAuth scopes to request.
        port: Local port for the redirect listener.

    Returns:
        Google OAuth2 credentials including a refresh token.
    """
    flow = InstalledAppFlow.from_client_config(client_config, scopes=scopes)
    return flow.run_local_server(
        port=port,
        open_browser=True,
        access_type="offline",
        prompt="consent",
    )


async def obtain_refresh_token(
    client_id: str,
    client_secret: str,
    port: int = DEFAULT_CONSENT_PORT,
    scopes: list[str] | None = None,
) -> str:
    """Authorize the Drive scope and return the granted refresh token.

    Args:
        client_id: Google OAuth client ID.
        client_secret: Google OAuth client secret.
        port: Local port for the redirect listener.
        scopes: Scopes to request, defaults to full Drive access.

    Returns:
        Refresh token string.

    Raises:
        ConfigurationError: If credentials are missing or Google granted no
            refresh token.
    """
    if not client_id or not client_secret:
        raise ConfigurationError("Client ID and secret are required for the consent flow.")

    client_config = {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": TOKEN_URI,
            "redirect_uris": [f"http://localhost:{port}/"],
        }
    }

    # Consent flow blocks on a local HTTP server
    loop = asyncio.get_running_loop()
    credentials = await loop.run_in_executor(
        None, _run_consent_flow, client_config, scopes or DRIVE_SCOPES, port
    )

    if not credentials.refresh_token:
        raise ConfigurationError(
            "Google did not return a refresh token. Revoke the app's access and try again."
        )
    return credentials.refresh_token
