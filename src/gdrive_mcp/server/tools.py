"""MCP tool catalog for Google Drive (23 tools).

Schemas use snake_case argument names; the argument models in
``gdrive_mcp.server.arguments`` validate the same names.
"""

from typing import Any

from mcp.types import Tool, ToolAnnotations


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def _number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def _string_list(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _fields(description: str = "Fields to include in response") -> dict[str, Any]:
    return {
        "fields": _string(description),
        "_fields": _string("Alias for fields parameter"),
    }


PAGE_TOKEN = _string("Pagination token from previous response")
SUPPORTS_ALL_DRIVES = _boolean("Whether the request supports shared drive items (default: false)")


def _read_only(title: str) -> ToolAnnotations:
    return ToolAnnotations(
        title=title, readOnlyHint=True, destructiveHint=False, openWorldHint=True
    )


def _write(title: str, *, destructive: bool = False, idempotent: bool = False) -> ToolAnnotations:
    return ToolAnnotations(
        title=title,
        readOnlyHint=False,
        destructiveHint=destructive,
        idempotentHint=idempotent,
        openWorldHint=True,
    )


FILE_TOOLS = [
    Tool(
        name="gd_search_files",
        description=(
            "Search and list files in Google Drive. Use the q parameter for powerful search "
            "queries: name contains, mimeType, parent folder, trashed status, date filters. "
            "Returns file metadata with pagination support."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "q": _string(
                    "Search query using Drive query syntax. Examples: \"name contains 'report'\", "
                    "\"mimeType = 'application/vnd.google-apps.folder'\", "
                    "\"'folderId' in parents\", \"trashed = false\", "
                    "\"modifiedTime > '2024-01-01'\""
                ),
                "page_size": _number("Maximum results per page (1-1000, default: 100)"),
                "page_token": PAGE_TOKEN,
                "order_by": _string(
                    'Sort order. Options: "createdTime", "folder", "modifiedByMeTime", '
                    '"modifiedTime", "name", "quotaBytesUsed", "recency", "sharedWithMeTime", '
                    '"starred", "viewedByMeTime". Append " desc" for descending.'
                ),
                "spaces": _string('Spaces to query: "drive", "appDataFolder" (default: "drive")'),
                "corpora": _string('Bodies of items to search: "user", "drive", "domain", "allDrives"'),
                "drive_id": _string('ID of the shared drive to search (requires corpora="drive")'),
                "include_items_from_all_drives": _boolean(
                    "Include items from shared drives (default: false)"
                ),
                "supports_all_drives": SUPPORTS_ALL_DRIVES,
                **_fields(
                    "Fields to include in response (default: id,name,mimeType,size,"
                    "modifiedTime,parents,webViewLink,owners,shared,trashed)"
                ),
            },
        },
        annotations=_read_only("Search Files"),
    ),
    Tool(
        name="gd_get_file",
        description=(
            "Get detailed metadata for a specific file or folder by ID. Returns all available "
            "metadata fields including size, owners, permissions, timestamps, and links."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file or folder"),
                "supports_all_drives": SUPPORTS_ALL_DRIVES,
                **_fields("Fields to include (default: all fields with *)"),
            },
            "required": ["file_id"],
        },
        annotations=_read_only("Get File Metadata"),
    ),
    Tool(
        name="gd_read_file",
        description=(
            "Read/download file content. Returns text content for text-based files (txt, csv, "
            "json, html, xml, code). For binary files, returns file info. For Google Workspace "
            "files (Docs, Sheets, Slides), use gd_export_file instead."
        ),
        inputSchema={
            "type": "object",
            "properties": {"file_id": _string("The ID of the file to read")},
            "required": ["file_id"],
        },
        annotations=_read_only("Read File Content"),
    ),
    Tool(
        name="gd_create_file",
        description=(
            "Create a new file or Google Workspace document (metadata only, no content upload). "
            "To create a folder, use gd_create_folder. For Google Docs, set mime_type to "
            '"application/vnd.google-apps.document".'
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "name": _string("File name"),
                "mime_type": _string(
                    'MIME type. Google Workspace: "application/vnd.google-apps.document" (Docs), '
                    '"application/vnd.google-apps.spreadsheet" (Sheets), '
                    '"application/vnd.google-apps.presentation" (Slides)'
                ),
                "parents": _string_list("Parent folder ID(s). If empty, file is created in root."),
                "description": _string("File description"),
                "starred": _boolean("Whether to star the file"),
                "properties": {
                    "type": "object",
                    "description": "Custom key-value properties for the file",
                },
            },
            "required": ["name"],
        },
        annotations=_write("Create File"),
    ),
    Tool(
        name="gd_update_file",
        description=(
            "Update file metadata: rename, change description, star/unstar, move between "
            "folders, or trash/untrash. Use add_parents/remove_parents to move files."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file to update"),
                "name": _string("New file name"),
                "description": _string("New description"),
                "mime_type": _string("New MIME type"),
                "starred": _boolean("Star or unstar the file"),
                "trashed": _boolean("Move to trash (true) or restore from trash (false)"),
                "add_parents": _string(
                    "Comma-separated parent folder IDs to add (moves file to these folders)"
                ),
                "remove_parents": _string(
                    "Comma-separated parent folder IDs to remove (moves file out of these folders)"
                ),
                "properties": {"type": "object", "description": "Custom key-value properties to set"},
            },
            "required": ["file_id"],
        },
        annotations=_write("Update File", idempotent=True),
    ),
    Tool(
        name="gd_copy_file",
        description=(
            "Create a copy of a file. Optionally specify a new name, destination folder, "
            "or description for the copy."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file to copy"),
                "name": _string('Name for the copy (default: "Copy of {original}")'),
                "parents": _string_list("Parent folder ID(s) for the copy"),
                "description": _string("Description for the copy"),
            },
            "required": ["file_id"],
        },
        annotations=_write("Copy File"),
    ),
    Tool(
        name="gd_delete_file",
        description=(
            "Permanently delete a file or folder. This action is irreversible: the file will "
            "NOT go to trash. Use gd_update_file with trashed=true to move to trash instead."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file or folder to permanently delete"),
                "supports_all_drives": SUPPORTS_ALL_DRIVES,
            },
            "required": ["file_id"],
        },
        annotations=_write("Delete File", destructive=True, idempotent=True),
    ),
    Tool(
        name="gd_export_file",
        description=(
            "Export a Google Workspace file (Docs, Sheets, Slides, Drawings) to a standard "
            "format. Use this for Google-native files; use gd_read_file for regular files. "
            "Supported exports: Docs to text/plain, text/html, application/pdf; Sheets to "
            "text/csv, application/pdf; Slides to application/pdf, text/plain."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the Google Workspace file to export"),
                "mime_type": _string(
                    'Export MIME type. Docs: "text/plain", "text/html", "application/pdf", '
                    '"application/vnd.openxmlformats-officedocument.wordprocessingml.document". '
                    'Sheets: "text/csv", "application/pdf", '
                    '"application/vnd.openxmlformats-officedocument.spreadsheetml.sheet". '
                    'Slides: "application/pdf", "text/plain".'
                ),
            },
            "required": ["file_id", "mime_type"],
        },
        annotations=_read_only("Export File"),
    ),
    Tool(
        name="gd_create_folder",
        description=(
            "Create a new folder in Google Drive. Optionally specify a parent folder to "
            "create it as a subfolder."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "name": _string("Folder name"),
                "parents": _string_list("Parent folder ID(s). If empty, created in root."),
                "description": _string("Folder description"),
            },
            "required": ["name"],
        },
        annotations=_write("Create Folder"),
    ),
    Tool(
        name="gd_empty_trash",
        description=(
            "Permanently delete ALL files in the trash. This action is irreversible. All "
            "trashed files for the authenticated user will be permanently removed. "
            "Requires confirm=true."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "confirm": _boolean("Must be true to confirm permanent deletion of all trashed files"),
            },
        },
        annotations=_write("Empty Trash", destructive=True, idempotent=True),
    ),
]

PERMISSION_TOOLS = [
    Tool(
        name="gd_list_permissions",
        description=(
            "List all permissions (sharing settings) for a file or folder. Shows who has "
            "access, their role (owner, writer, commenter, reader), and sharing type "
            "(user, group, domain, anyone)."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file or folder"),
                "page_size": _number("Maximum results per page (1-100)"),
                "page_token": PAGE_TOKEN,
                "supports_all_drives": SUPPORTS_ALL_DRIVES,
                **_fields(),
            },
            "required": ["file_id"],
        },
        annotations=_read_only("List Permissions"),
    ),
    Tool(
        name="gd_share_file",
        description=(
            "Share a file or folder by creating a permission. Share with a specific user "
            "(email), domain, or make public (anyone). Set role to control access level."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file or folder to share"),
                "type": _string('Permission type: "user", "group", "domain", "anyone"'),
                "role": _string(
                    'Access level: "owner", "organizer", "fileOrganizer", "writer", '
                    '"commenter", "reader"'
                ),
                "email_address": _string(
                    'Email address of the user or group (required for type "user" or "group")'
                ),
                "domain": _string('Domain name (required for type "domain")'),
                "send_notification_email": _boolean(
                    "Send notification email to the user (default: true)"
                ),
                "email_message": _string("Custom message in the notification email"),
                "transfer_ownership": _boolean(
                    'Transfer ownership to the specified user (role must be "owner")'
                ),
                "supports_all_drives": SUPPORTS_ALL_DRIVES,
            },
            "required": ["file_id", "type", "role"],
        },
        annotations=_write("Share File"),
    ),
    Tool(
        name="gd_unshare_file",
        description=(
            "Remove a permission from a file or folder, revoking access for a user, group, "
            "or domain. Use gd_list_permissions to find the permission_id first."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file or folder"),
                "permission_id": _string(
                    "The ID of the permission to remove (from gd_list_permissions)"
                ),
                "supports_all_drives": SUPPORTS_ALL_DRIVES,
            },
            "required": ["file_id", "permission_id"],
        },
        annotations=_write("Unshare File", destructive=True, idempotent=True),
    ),
]

COMMENT_TOOLS = [
    Tool(
        name="gd_list_comments",
        description=(
            "List comments on a file. Returns comment text, author, timestamps, resolved "
            "status, and inline replies."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file"),
                "page_size": _number("Maximum results per page (1-100, default: 20)"),
                "page_token": PAGE_TOKEN,
                "start_modified_time": _string(
                    "Only return comments modified after this time (RFC3339)"
                ),
                "include_deleted": _boolean("Include deleted comments (default: false)"),
                **_fields(),
            },
            "required": ["file_id"],
        },
        annotations=_read_only("List Comments"),
    ),
    Tool(
        name="gd_create_comment",
        description=(
            "Add a comment to a file. The comment will be attributed to the authenticated user."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file to comment on"),
                "content": _string("The comment text (plain text)"),
                "anchor": _string("JSON anchor region for the comment (optional)"),
                "quoted_file_content": {
                    "type": "object",
                    "description": "Quoted document text the comment refers to",
                    "properties": {
                        "mimeType": _string("MIME type of the quoted content (default: text/plain)"),
                        "value": _string("The quoted content"),
                    },
                    "required": ["value"],
                },
            },
            "required": ["file_id", "content"],
        },
        annotations=_write("Create Comment"),
    ),
    Tool(
        name="gd_delete_comment",
        description=(
            "Delete a comment from a file. Only the comment author or file owner can "
            "delete comments."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file"),
                "comment_id": _string("The ID of the comment to delete"),
            },
            "required": ["file_id", "comment_id"],
        },
        annotations=_write("Delete Comment", destructive=True, idempotent=True),
    ),
]

REPLY_TOOLS = [
    Tool(
        name="gd_list_replies",
        description="List replies to a specific comment on a file.",
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file"),
                "comment_id": _string("The ID of the comment"),
                "page_size": _number("Maximum results per page (1-100, default: 20)"),
                "page_token": PAGE_TOKEN,
                "include_deleted": _boolean("Include deleted replies (default: false)"),
                **_fields(),
            },
            "required": ["file_id", "comment_id"],
        },
        annotations=_read_only("List Replies"),
    ),
    Tool(
        name="gd_create_reply",
        description=(
            "Reply to a comment on a file. Optionally resolve the comment thread with "
            'action="resolve".'
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file"),
                "comment_id": _string("The ID of the comment to reply to"),
                "content": _string("The reply text (plain text)"),
                "action": _string(
                    'Action to perform: "resolve" (resolve the comment thread) or '
                    '"reopen" (reopen a resolved thread)'
                ),
            },
            "required": ["file_id", "comment_id", "content"],
        },
        annotations=_write("Create Reply"),
    ),
]

SHARED_DRIVE_TOOLS = [
    Tool(
        name="gd_list_drives",
        description=(
            "List shared drives (formerly Team Drives) that the user has access to. "
            "Supports search query for filtering by name."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "page_size": _number("Maximum results per page (1-100, default: 10)"),
                "page_token": PAGE_TOKEN,
                "q": _string(
                    "Search query to filter shared drives (e.g., \"name contains 'project'\")"
                ),
                **_fields(),
            },
        },
        annotations=_read_only("List Shared Drives"),
    ),
    Tool(
        name="gd_create_drive",
        description=(
            "Create a new shared drive (requires Google Workspace account). The authenticated "
            "user becomes the organizer."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "name": _string("Name for the shared drive"),
                "theme_id": _string(
                    "Theme ID for the shared drive background (from gd_about driveThemes)"
                ),
            },
            "required": ["name"],
        },
        annotations=_write("Create Shared Drive"),
    ),
    Tool(
        name="gd_delete_drive",
        description=(
            "Permanently delete a shared drive. The drive must be empty (no files) before it "
            "can be deleted. This action is irreversible."
        ),
        inputSchema={
            "type": "object",
            "properties": {"drive_id": _string("The ID of the shared drive to delete")},
            "required": ["drive_id"],
        },
        annotations=_write("Delete Shared Drive", destructive=True, idempotent=True),
    ),
]

REVISION_TOOLS = [
    Tool(
        name="gd_list_revisions",
        description=(
            "List revision history for a file. Shows who modified the file, when, file size "
            "at each revision, and checksums."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "file_id": _string("The ID of the file"),
                "page_size": _number("Maximum results per page (1-200, default: 200)"),
                "page_token": PAGE_TOKEN,
                **_fields(),
            },
            "required": ["file_id"],
        },
        annotations=_read_only("List Revisions"),
    ),
]

ABOUT_TOOLS = [
    Tool(
        name="gd_about",
        description=(
            "Get information about the authenticated user and their Google Drive: storage "
            "quota, import/export formats, and capabilities."
        ),
        inputSchema={"type": "object", "properties": {**_fields()}},
        annotations=_read_only("About Drive"),
    ),
]

TOOL_CATEGORIES: dict[str, list[Tool]] = {
    "files": FILE_TOOLS,
    "permissions": PERMISSION_TOOLS,
    "comments": COMMENT_TOOLS,
    "replies": REPLY_TOOLS,
    "shared_drives": SHARED_DRIVE_TOOLS,
    "revisions": REVISION_TOOLS,
    "about": ABOUT_TOOLS,
}

TOOLS: list[Tool] = [tool for tools in TOOL_CATEGORIES.values() for tool in tools]
