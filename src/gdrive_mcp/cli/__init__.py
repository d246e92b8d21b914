"""Command-line interface for gdrive-mcp."""

from gdrive_mcp.cli.main import main

__all__ = ["main"]
