"""Tool dispatch: route a tool name and raw arguments to one client call.

Each entry of ROUTES pairs a validated argument model with the DriveClient
operation it feeds. The dispatcher adds no transformation of results:
whatever the client returns or raises is passed through unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.errors import DispatchError, InvalidArgumentsError
from gdrive_mcp.server import arguments as args

logger = logging.getLogger(__name__)

EMPTY_TRASH_CONFIRMATION_MESSAGE = "Set confirm=true to permanently delete all trashed files"


@dataclass(frozen=True)
class ToolRoute:
    """How one tool maps onto the Drive client.

    Attributes:
        arguments: Model validating the raw argument mapping.
        operation: Name of the DriveClient coroutine method to call.
        requires_confirmation: Reject the call unless ``confirm`` is truthy.
    """

    arguments: type[args.ToolArguments]
    operation: str
    requires_confirmation: bool = False


ROUTES: dict[str, ToolRoute] = {
    # Files
    "gd_search_files": ToolRoute(args.SearchFilesArguments, "search_files"),
    "gd_get_file": ToolRoute(args.GetFileArguments, "get_file"),
    "gd_read_file": ToolRoute(args.ReadFileArguments, "read_file"),
    "gd_create_file": ToolRoute(args.CreateFileArguments, "create_file"),
    "gd_update_file": ToolRoute(args.UpdateFileArguments, "update_file"),
    "gd_copy_file": ToolRoute(args.CopyFileArguments, "copy_file"),
    "gd_delete_file": ToolRoute(args.DeleteFileArguments, "delete_file"),
    "gd_export_file": ToolRoute(args.ExportFileArguments, "export_file"),
    "gd_create_folder": ToolRoute(args.CreateFolderArguments, "create_folder"),
    "gd_empty_trash": ToolRoute(
        args.EmptyTrashArguments, "empty_trash", requires_confirmation=True
    ),
    # Permissions
    "gd_list_permissions": ToolRoute(args.ListPermissionsArguments, "list_permissions"),
    "gd_share_file": ToolRoute(args.ShareFileArguments, "share_file"),
    "gd_unshare_file": ToolRoute(args.UnshareFileArguments, "unshare_file"),
    # Comments
    "gd_list_comments": ToolRoute(args.ListCommentsArguments, "list_comments"),
    "gd_create_comment": ToolRoute(args.CreateCommentArguments, "create_comment"),
    "gd_delete_comment": ToolRoute(args.DeleteCommentArguments, "delete_comment"),
    # Replies
    "gd_list_replies": ToolRoute(args.ListRepliesArguments, "list_replies"),
    "gd_create_reply": ToolRoute(args.CreateReplyArguments, "create_reply"),
    # Shared drives
    "gd_list_drives": ToolRoute(args.ListDrivesArguments, "list_drives"),
    "gd_create_drive": ToolRoute(args.CreateDriveArguments, "create_drive"),
    "gd_delete_drive": ToolRoute(args.DeleteDriveArguments, "delete_drive"),
    # Revisions
    "gd_list_revisions": ToolRoute(args.ListRevisionsArguments, "list_revisions"),
    # About
    "gd_about": ToolRoute(args.AboutArguments, "about"),
}


def parse_arguments(name: str, arguments: dict[str, Any] | None) -> args.ToolArguments:
    """Validate raw arguments for a tool.

    Args:
        name: Tool name.
        arguments: Raw argument mapping from the MCP request.

    Returns:
        Validated argument model.

    Raises:
        DispatchError: If the tool is unknown, or its confirmation guard
            is not satisfied.
        InvalidArgumentsError: If the arguments fail validation.
    """
    route = ROUTES.get(name)
    if route is None:
        raise DispatchError(f"Unknown tool: {name}")

    try:
        parsed = route.arguments.model_validate(arguments or {})
    except ValidationError as e:
        raise InvalidArgumentsError(name, e) from e

    if route.requires_confirmation and not getattr(parsed, "confirm", False):
        raise DispatchError(EMPTY_TRASH_CONFIRMATION_MESSAGE)

    return parsed


async def dispatch_tool(
    client: DriveClient, name: str, arguments: dict[str, Any] | None
) -> Any:
    """Dispatch a tool call to the appropriate client operation.

    Args:
        client: Authenticated Drive client.
        name: Tool name.
        arguments: Raw argument mapping with snake_case keys.

    Returns:
        The client operation's result, unchanged.

    Raises:
        DispatchError: If the tool is unknown or a guard rejects the call.
        InvalidArgumentsError: If the arguments fail validation.
        AuthError: If a token refresh fails.
        ApiError: If the Drive API rejects the request.
    """
    parsed = parse_arguments(name, arguments)
    operation = getattr(client, ROUTES[name].operation)

    logger.debug(f"Dispatching {name} to DriveClient.{ROUTES[name].operation}")
    return await operation(**parsed.to_kwargs())
