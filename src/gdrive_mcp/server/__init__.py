"""MCP server exposing Google Drive tools."""

from gdrive_mcp.server.drive_server import GoogleDriveServer, main
from gdrive_mcp.server.tools import TOOLS

__all__ = ["GoogleDriveServer", "TOOLS", "main"]
