"""Google Drive v3 REST client."""

from gdrive_mcp.drive.client import DRIVE_API_BASE, DriveClient

__all__ = ["DriveClient", "DRIVE_API_BASE"]
