"""Validated argument models for each Drive tool.

Raw MCP arguments arrive as a flat mapping with snake_case keys. Each tool
validates that mapping into one of these models before dispatch, so missing
or mistyped arguments surface as a structured error instead of reaching the
API. ``to_kwargs`` yields the keyword arguments for the matching
DriveClient operation.
"""

from typing import Any

from pydantic import BaseModel, Field


class ToolArguments(BaseModel):
    """Base model for tool arguments.

    Unknown keys are ignored: credential fallbacks such as GOOGLE_CLIENT_ID
    travel in the same mapping.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    def to_kwargs(self) -> dict[str, Any]:
        """Client call keyword arguments, omitting unset values."""
        return self.model_dump(exclude_none=True)


class FieldsArguments(ToolArguments):
    """Arguments for tools taking a field projection as fields or _fields."""

    fields: str | None = None
    fields_alias: str | None = Field(default=None, alias="_fields", exclude=True)

    def to_kwargs(self) -> dict[str, Any]:
        kwargs = super().to_kwargs()
        projection = self.fields or self.fields_alias
        if projection:
            kwargs["fields"] = projection
        return kwargs


class PagedArguments(FieldsArguments):
    page_size: int | None = Field(default=None, ge=1)
    page_token: str | None = None


# =============================================================================
# Files
# =============================================================================


class SearchFilesArguments(PagedArguments):
    q: str | None = None
    order_by: str | None = None
    spaces: str | None = None
    corpora: str | None = None
    drive_id: str | None = None
    include_items_from_all_drives: bool | None = None
    supports_all_drives: bool | None = None


class GetFileArguments(FieldsArguments):
    file_id: str
    supports_all_drives: bool | None = None


class ReadFileArguments(ToolArguments):
    file_id: str


class CreateFileArguments(ToolArguments):
    name: str
    mime_type: str | None = None
    parents: list[str] | None = None
    description: str | None = None
    starred: bool | None = None
    properties: dict[str, str] | None = None


class UpdateFileArguments(ToolArguments):
    file_id: str
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None
    starred: bool | None = None
    trashed: bool | None = None
    add_parents: str | None = None
    remove_parents: str | None = None
    properties: dict[str, str] | None = None


class CopyFileArguments(ToolArguments):
    file_id: str
    name: str | None = None
    parents: list[str] | None = None
    description: str | None = None


class DeleteFileArguments(ToolArguments):
    file_id: str
    supports_all_drives: bool | None = None


class ExportFileArguments(ToolArguments):
    file_id: str
    mime_type: str


class CreateFolderArguments(ToolArguments):
    name: str
    parents: list[str] | None = None
    description: str | None = None


class EmptyTrashArguments(ToolArguments):
    # Checked by the dispatcher, never forwarded to the client
    confirm: bool = Field(default=False, exclude=True)


# =============================================================================
# Permissions
# =============================================================================


class ListPermissionsArguments(PagedArguments):
    file_id: str
    supports_all_drives: bool | None = None


class ShareFileArguments(ToolArguments):
    file_id: str
    permission_type: str = Field(..., alias="type")
    role: str
    email_address: str | None = None
    domain: str | None = None
    send_notification_email: bool | None = None
    email_message: str | None = None
    transfer_ownership: bool | None = None
    supports_all_drives: bool | None = None


class UnshareFileArguments(ToolArguments):
    file_id: str
    permission_id: str
    supports_all_drives: bool | None = None


# =============================================================================
# Comments and replies
# =============================================================================


class ListCommentsArguments(PagedArguments):
    file_id: str
    start_modified_time: str | None = None
    include_deleted: bool | None = None


class QuotedFileContent(BaseModel):
    mimeType: str = "text/plain"
    value: str


class CreateCommentArguments(ToolArguments):
    file_id: str
    content: str
    anchor: str | None = None
    quoted_file_content: QuotedFileContent | None = None


class DeleteCommentArguments(ToolArguments):
    file_id: str
    comment_id: str


class ListRepliesArguments(PagedArguments):
    file_id: str
    comment_id: str
    include_deleted: bool | None = None


class CreateReplyArguments(ToolArguments):
    file_id: str
    comment_id: str
    content: str
    action: str | None = None


# =============================================================================
# Shared drives, revisions, about
# =============================================================================


class ListDrivesArguments(PagedArguments):
    q: str | None = None


class CreateDriveArguments(ToolArguments):
    name: str
    theme_id: str | None = None


class DeleteDriveArguments(ToolArguments):
    drive_id: str


class ListRevisionsArguments(PagedArguments):
    file_id: str


class AboutArguments(FieldsArguments):
    pass
