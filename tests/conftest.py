"""Shared pytest fixtures for gdrive-mcp tests.

This module provides a fake Google backend (token endpoint plus Drive API)
built on httpx.MockTransport, credentials, and ready-made clients.
"""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest
import pytest_asyncio
from click.testing import CliRunner

from gdrive_mcp.auth.models import AccessToken, DriveCredentials
from gdrive_mcp.config import CONFIG_KEYS, DriveConfig
from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.server.drive_server import GoogleDriveServer

TOKEN_HOST = "oauth2.googleapis.com"
API_PREFIX = "/drive/v3"

# =============================================================================
# Fake Google Backend
# =============================================================================


class FakeDriveAPI:
    """Records every request and answers from a small route table.

    Token requests get a fresh access token per call. Drive API requests are
    matched on (method, path below /drive/v3); unmatched requests get an
    empty JSON object.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.token_status = 200
        self.token_body: str | None = None
        self.expires_in = 3599
        self.token_calls = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        """Build an AsyncClient wired to this fake backend."""
        return httpx.AsyncClient(transport=self.transport)

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == TOKEN_HOST]

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host != TOKEN_HOST]

    def respond(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Register a canned response for a Drive API route."""

        def responder(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status, content=content, headers=headers)
            if json is None:
                return httpx.Response(status, headers=headers)
            return httpx.Response(status, json=json, headers=headers)

        self.routes[(method, path)] = responder

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == TOKEN_HOST:
            self.token_calls += 1
            if self.token_status != 200:
                return httpx.Response(self.token_status, text=self.token_body or "")
            return httpx.Response(
                200,
                json={
                    "access_token": f"access-{self.token_calls}",
                    "expires_in": self.expires_in,
                    "token_type": "Bearer",
                },
            )

        path = request.url.path.removeprefix(API_PREFIX)
        responder = self.routes.get((request.method, path))
        if responder is None:
            return httpx.Response(200, json={})
        return responder(request)


@pytest.fixture
def fake_api() -> FakeDriveAPI:
    """Create a fresh fake Google backend."""
    return FakeDriveAPI()


# =============================================================================
# Credential Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials in the environment out of tests."""
    for key in CONFIG_KEYS.values():
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def credentials() -> DriveCredentials:
    """Create test OAuth credentials."""
    return DriveCredentials(
        client_id="test-client-id.apps.googleusercontent.com",
        client_secret="test-client-secret",  # pragma: allowlist secret
        refresh_token="test-refresh-token",
    )


@pytest.fixture
def drive_config(credentials: DriveCredentials) -> DriveConfig:
    """Create a complete config carrying the test credentials."""
    return DriveConfig(
        client_id=credentials.client_id,
        client_secret=credentials.client_secret,
        refresh_token=credentials.refresh_token,
    )


@pytest.fixture
def fresh_token() -> AccessToken:
    """Create an access token valid for another hour."""
    return AccessToken(
        access_token="cached-access-token",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
    )


# =============================================================================
# Client and Server Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def drive_client(
    credentials: DriveCredentials, fake_api: FakeDriveAPI
) -> AsyncGenerator[DriveClient, None]:
    """Create a DriveClient talking to the fake backend."""
    client = DriveClient(credentials, http_client=fake_api.client())
    yield client
    await client.close()


@pytest_asyncio.fixture
async def drive_server(
    drive_config: DriveConfig, fake_api: FakeDriveAPI
) -> AsyncGenerator[GoogleDriveServer, None]:
    """Create a configured server whose clients talk to the fake backend."""
    server = GoogleDriveServer(config=drive_config, http_client_factory=fake_api.client)
    yield server
    await server.close()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()
