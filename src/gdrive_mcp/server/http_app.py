"""Streamable HTTP transport for the Google Drive MCP server.

``POST /mcp`` carries MCP messages; the session manager runs stateless, so
each request is self-contained. Credentials may be supplied as query
parameters of the ``/mcp`` URL (GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET,
GOOGLE_REFRESH_TOKEN). They are scoped to that request and never written to
the process environment.
"""

import contextlib
import logging
from collections.abc import AsyncIterator
from urllib.parse import parse_qsl

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.config import DriveConfig, request_config
from gdrive_mcp.server.drive_server import SERVER_NAME, GoogleDriveServer
from gdrive_mcp.server.tools import TOOLS

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"


def query_config(scope: Scope) -> DriveConfig:
    """Read per-request settings from the query string of an ASGI scope."""
    query_string = scope.get("query_string", b"").decode("latin-1")
    return DriveConfig.from_mapping(dict(parse_qsl(query_string)))


class MCPEndpoint:
    """ASGI endpoint handing ``/mcp`` requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        token = request_config.set(query_config(scope))
        try:
            await self.session_manager.handle_request(scope, receive, send)
        finally:
            request_config.reset(token)


def create_http_app(drive_server: GoogleDriveServer) -> Starlette:
    """Build the Starlette application serving MCP over streamable HTTP.

    Args:
        drive_server: Server whose handlers answer MCP requests.

    Returns:
        ASGI application with ``GET /`` health and ``/mcp`` routes.
    """
    session_manager = StreamableHTTPSessionManager(
        app=drive_server.server,
        json_response=True,
        stateless=True,
    )

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": SERVER_NAME,
                "version": __version__,
                "status": "ok",
                "tools": len(TOOLS),
                "transport": "streamable-http",
                "endpoints": {"mcp": MCP_PATH},
            }
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info(f"Google Drive MCP server ready at {MCP_PATH}")
            try:
                yield
            finally:
                await drive_server.close()

    return Starlette(
        routes=[
            Route("/", endpoint=health, methods=["GET"]),
            Route(MCP_PATH, endpoint=MCPEndpoint(session_manager)),
        ],
        lifespan=lifespan,
    )


def run_http(drive_server: GoogleDriveServer, host: str = "0.0.0.0", port: int = 3000) -> None:
    """Serve the HTTP application with uvicorn (blocking)."""
    import uvicorn

    logger.info(f"Starting HTTP transport on {host}:{port}")
    uvicorn.run(create_http_app(drive_server), host=host, port=port)
