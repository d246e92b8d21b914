"""Google Drive MCP server.

This MCP server exposes 23 Google Drive v3 tools (files, permissions,
comments, replies, shared drives, revisions, about) plus two guidance
prompts and a server-info resource.

Credentials are resolved per tool call, so one process can serve callers
that bring their own credentials in HTTP query parameters or tool
arguments. The DriveClient, with its token cache and connection pool, is
reused across calls with the same resolved credentials.
"""

import asyncio
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import GetPromptResult, Prompt, Resource, TextContent, Tool
from pydantic import AnyUrl

from gdrive_mcp.auth.models import DriveCredentials
from gdrive_mcp.config import DriveConfig, request_config, resolve_config
from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.server import prompts
from gdrive_mcp.server.dispatch import dispatch_tool
from gdrive_mcp.server.tools import TOOLS

logger = logging.getLogger(__name__)

SERVER_NAME = prompts.SERVER_NAME


class GoogleDriveServer:
    """MCP server for the Google Drive API.

    Attributes:
        server: MCP Server instance.
        config: Settings from the process environment.
        file_config: Settings from an optional YAML config file.
    """

    def __init__(
        self,
        config: DriveConfig | None = None,
        file_config: DriveConfig | None = None,
        http_client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        """Initialize the Google Drive MCP server.

        Args:
            config: Highest-precedence settings, usually from the environment.
            file_config: Settings loaded from a config file.
            http_client_factory: Builds the HTTP client for each new
                DriveClient. The client's own pooled default is used if not
                provided.
        """
        self.server = Server(SERVER_NAME)
        self.config = config or DriveConfig()
        self.file_config = file_config
        self._http_client_factory = http_client_factory
        self._clients: dict[tuple[DriveCredentials, float], DriveClient] = {}
        self._client_lock = asyncio.Lock()
        self._setup_handlers()

    @property
    def static_config(self) -> DriveConfig:
        """Settings known without a request: environment over config file."""
        return resolve_config(self.config, self.file_config)

    def _setup_handlers(self) -> None:
        """Register MCP handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """Return list of available tools."""
            return TOOLS

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await self.call_tool_text(name, arguments)

        @self.server.list_prompts()
        async def list_prompts() -> list[Prompt]:
            return prompts.list_prompts()

        @self.server.get_prompt()
        async def get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
            return prompts.get_prompt(name)

        @self.server.list_resources()
        async def list_resources() -> list[Resource]:
            return [prompts.SERVER_INFO_RESOURCE]

        @self.server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            if str(uri).rstrip("/") != prompts.SERVER_INFO_URI:
                raise ValueError(f"Unknown resource: {uri}")
            return [
                ReadResourceContents(
                    content=prompts.render_server_info(self.static_config),
                    mime_type="application/json",
                )
            ]

    def _resolve_config(self, arguments: dict[str, Any] | None) -> DriveConfig:
        """Merge settings for one call: env, then query, then file, then arguments."""
        return resolve_config(
            self.config,
            request_config.get(),
            self.file_config,
            DriveConfig.from_mapping(arguments or {}),
        )

    async def _get_client(self, config: DriveConfig) -> DriveClient:
        """Get the Drive client for the given settings.

        One client is kept per distinct credential triple and timeout, so a
        call with new credentials never closes a client another call is
        still using. All of them are closed by :meth:`close`.

        Raises:
            ConfigurationError: If any credential is missing.
        """
        credentials = config.credentials()
        key = (credentials, config.request_timeout)

        async with self._client_lock:
            client = self._clients.get(key)
            if client is not None:
                return client

            if self._clients:
                logger.info("New credentials, building another Drive client")
            http_client = self._http_client_factory() if self._http_client_factory else None
            client = DriveClient(
                credentials, http_client=http_client, timeout=config.request_timeout
            )
            self._clients[key] = client
            return client

    async def call_tool_text(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent]:
        """Run a tool and render its result as pretty-printed JSON.

        Args:
            name: Tool name.
            arguments: Raw tool arguments, possibly carrying credentials.

        Returns:
            Single text content item with the JSON result.

        Raises:
            DriveMCPError: Any configuration, dispatch, auth or API failure.
                The MCP layer turns it into an error result.
        """
        try:
            client = await self._get_client(self._resolve_config(arguments))
            result = await dispatch_tool(client, name, arguments)
        except Exception:
            logger.exception(f"Error calling tool {name}")
            raise
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    async def close(self) -> None:
        """Close every Drive client and its HTTP pool."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        logger.info(f"Google Drive MCP server running on stdio ({len(TOOLS)} tools)")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Google Drive MCP server over stdio."""
    server = GoogleDriveServer(config=DriveConfig.from_environ())
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
