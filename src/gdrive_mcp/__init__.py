"""Google Drive MCP Server.

Connect AI agents to the Google Drive v3 API: files, sharing, comments,
shared drives, and revisions.
"""

from gdrive_mcp.__version__ import __version__

__all__ = ["__version__"]
