"""Guidance prompts and the server-info resource."""

import json
from typing import Any

from mcp.types import GetPromptResult, Prompt, PromptMessage, Resource, TextContent

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.config import DriveConfig
from gdrive_mcp.server.tools import TOOL_CATEGORIES, TOOLS

SERVER_NAME = "google-drive-mcp"

SERVER_INFO_URI = "google-drive://server-info"

SEARCH_AND_ORGANIZE_TEXT = "\n".join(
    [
        "You are a Google Drive file management assistant.",
        "",
        "Available file operations:",
        "1. **Search**: Use gd_search_files with query syntax: name contains, mimeType, "
        "parent folder, trashed status",
        "2. **Read metadata**: Use gd_get_file for full file details",
        "3. **Read content**: Use gd_read_file for text files, gd_export_file for Google "
        "Workspace files",
        "4. **Create**: Use gd_create_file for files, gd_create_folder for folders",
        "5. **Organize**: Use gd_update_file to rename, move (add/remove parents), star, "
        "or trash files",
        "6. **Copy**: Use gd_copy_file to duplicate files",
        "7. **Share**: Use gd_share_file to share, gd_list_permissions to check access",
        "",
        "Search query examples:",
        "- name contains 'report': find files with \"report\" in name",
        "- mimeType = 'application/vnd.google-apps.folder': list folders only",
        "- 'folderId' in parents: list files in a specific folder",
        "- trashed = false and modifiedTime > '2024-01-01': recent non-trashed files",
        "- fullText contains 'keyword': full-text search in file content",
    ]
)

COLLABORATE_AND_COMMENT_TEXT = "\n".join(
    [
        "You are a Google Drive collaboration assistant.",
        "",
        "Sharing & permissions:",
        "1. **List access**: gd_list_permissions to see who has access",
        '2. **Share with user**: gd_share_file with type="user", '
        'role="writer"/"reader"/"commenter"',
        '3. **Share publicly**: gd_share_file with type="anyone", role="reader"',
        '4. **Share with domain**: gd_share_file with type="domain", domain="example.com"',
        "5. **Remove access**: gd_unshare_file with the permission ID",
        "",
        "Comments & replies:",
        "1. **View comments**: gd_list_comments on a file",
        "2. **Add comment**: gd_create_comment with your text",
        '3. **Reply**: gd_create_reply to respond or resolve (action="resolve")',
        "4. **Delete**: gd_delete_comment to remove a comment",
    ]
)

PROMPTS: dict[str, tuple[Prompt, str]] = {
    "search-and-organize": (
        Prompt(
            name="search-and-organize",
            description="Guide for searching, browsing, and organizing files in Google Drive",
        ),
        SEARCH_AND_ORGANIZE_TEXT,
    ),
    "collaborate-and-comment": (
        Prompt(
            name="collaborate-and-comment",
            description="Guide for sharing files, managing permissions, and working with comments",
        ),
        COLLABORATE_AND_COMMENT_TEXT,
    ),
}

SERVER_INFO_RESOURCE = Resource(
    uri=SERVER_INFO_URI,
    name="server-info",
    description="Connection status and available tools for this Google Drive MCP server",
    mimeType="application/json",
)


def list_prompts() -> list[Prompt]:
    """Return the available prompt definitions."""
    return [prompt for prompt, _ in PROMPTS.values()]


def get_prompt(name: str) -> GetPromptResult:
    """Render a prompt as a single user message.

    Args:
        name: Prompt name.

    Returns:
        Prompt result with one text message.

    Raises:
        ValueError: If the prompt name is not recognized.
    """
    if name not in PROMPTS:
        raise ValueError(f"Unknown prompt: {name}")

    prompt, text = PROMPTS[name]
    return GetPromptResult(
        description=prompt.description,
        messages=[PromptMessage(role="user", content=TextContent(type="text", text=text))],
    )


def server_info(config: DriveConfig) -> dict[str, Any]:
    """Describe the server for the server-info resource.

    Args:
        config: Server-level configuration (environment and config file).

    Returns:
        Mapping with name, version, connection state and tool counts.
    """
    return {
        "name": SERVER_NAME,
        "version": __version__,
        "connected": config.has_credentials,
        "has_oauth": bool(config.client_id),
        "tools_available": len(TOOLS),
        "tool_categories": {category: len(tools) for category, tools in TOOL_CATEGORIES.items()},
    }


def render_server_info(config: DriveConfig) -> str:
    """Server info as pretty-printed JSON."""
    return json.dumps(server_info(config), indent=2)
