"""Async client for the Google Drive v3 REST API.

Every remote operation is a fixed translation: present optional inputs are
collected into query parameters or a JSON body (absent ones are omitted
entirely), a default ``fields`` projection is chosen when none is given, and
the call is delegated to :meth:`DriveClient.request`.
"""

import logging
import uuid
from typing import Any
from urllib.parse import quote

import httpx

from gdrive_mcp.auth.models import DriveCredentials
from gdrive_mcp.auth.token_manager import TokenManager
from gdrive_mcp.drive.content import (
    binary_export_placeholder,
    binary_file_placeholder,
    is_text_mime_type,
)
from gdrive_mcp.errors import ApiError, DriveMCPError

logger = logging.getLogger(__name__)

DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

DEFAULT_TIMEOUT = 30.0

# Default field projections: bounded responses with the commonly needed attributes
FILE_LIST_FIELDS = (
    "nextPageToken,"
    "files(id,name,mimeType,size,modifiedTime,parents,webViewLink,owners,shared,trashed)"
)
PERMISSION_LIST_FIELDS = (
    "nextPageToken,"
    "permissions(id,type,emailAddress,domain,role,displayName,expirationTime,deleted,pendingOwner)"
)
COMMENT_LIST_FIELDS = (
    "nextPageToken,comments(id,createdTime,modifiedTime,author,content,deleted,resolved,replies)"
)
REPLY_LIST_FIELDS = (
    "nextPageToken,replies(id,createdTime,modifiedTime,author,content,deleted,action)"
)
DRIVE_LIST_FIELDS = "nextPageToken,drives(id,name,createdTime,hidden,restrictions)"
REVISION_LIST_FIELDS = (
    "nextPageToken,"
    "revisions(id,mimeType,modifiedTime,keepForever,published,lastModifyingUser,"
    "originalFilename,md5Checksum,size)"
)
ABOUT_FIELDS = (
    "user,storageQuota,importFormats,exportFormats,maxUploadSize,"
    "appInstalled,canCreateDrives,folderColorPalette"
)
ALL_FIELDS = "*"


def _segment(value: str) -> str:
    """Percent-encode an identifier for use as a single path segment."""
    return quote(str(value), safe="")


def _query(**params: Any) -> dict[str, str]:
    """Build query parameters, dropping unset values.

    Booleans are rendered as "true"/"false" and numbers as decimal strings.
    """
    query: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def _body(**fields: Any) -> dict[str, Any]:
    """Build a JSON body, dropping unset values."""
    return {key: value for key, value in fields.items() if value is not None}


class DriveClient:
    """Authenticated Google Drive API v3 client.

    Owns the OAuth token cache and a pooled HTTP client. One instance serves
    one set of credentials.

    Attributes:
        credentials: OAuth credentials this client authenticates with.
        tokens: Access token manager.

    Example:
        ```python
        async with DriveClient(credentials) as client:
            listing = await client.search_files(q="name contains 'report'")
        ```
    """

    def __init__(
        self,
        credentials: DriveCredentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the Drive client.

        Args:
            credentials: OAuth client credentials and refresh token.
            http_client: Pre-built HTTP client. Created lazily if not provided.
            timeout: Per-request timeout in seconds.
        """
        self.credentials = credentials
        self.timeout = timeout
        self._http_client = http_client
        self._closed = False
        self.tokens = TokenManager(credentials, self._get_http_client)

    async def __aenter__(self) -> "DriveClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client with connection pooling.

        Returns:
            Shared httpx.AsyncClient instance.

        Raises:
            DriveMCPError: If the client has been closed.
        """
        if self._closed:
            raise DriveMCPError("Drive client is closed")
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(self.timeout, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        self._closed = True
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_error:
            raise ApiError(response.status_code, response.text)

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        raw: bool = False,
    ) -> Any:
        """Make an authenticated request against the Drive API.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE).
            path: Resource path relative to the v3 base URL.
            body: Optional JSON body.
            params: Optional query parameters.
            raw: Return the response text verbatim instead of parsing JSON.

        Returns:
            Parsed JSON (``{}`` for empty bodies), or with ``raw`` a mapping of
            ``content`` and ``mimeType``.

        Raises:
            AuthError: If a token refresh fails.
            ApiError: If the API returns a non-success status.
        """
        access_token = await self.tokens.get_access_token()
        client = await self._get_http_client()

        logger.debug(f"Drive API {method} {path}")
        response = await client.request(
            method=method,
            url=f"{DRIVE_API_BASE}{path}",
            params=params,
            json=body,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
        )
        self._raise_for_status(response)

        if raw:
            return {
                "content": response.text,
                "mimeType": response.headers.get("content-type", "text/plain"),
            }

        if not response.content:
            return {}
        return response.json()

    async def _download(self, path: str, params: dict[str, str]) -> httpx.Response:
        """Fetch raw file bytes with only the Authorization header."""
        access_token = await self.tokens.get_access_token()
        client = await self._get_http_client()

        logger.debug(f"Drive API GET {path} (content)")
        response = await client.get(
            f"{DRIVE_API_BASE}{path}",
            params=params,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        self._raise_for_status(response)
        return response

    # =========================================================================
    # Files
    # =========================================================================

    async def search_files(
        self,
        *,
        q: str | None = None,
        fields: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
        order_by: str | None = None,
        spaces: str | None = None,
        corpora: str | None = None,
        drive_id: str | None = None,
        include_items_from_all_drives: bool | None = None,
        supports_all_drives: bool | None = None,
    ) -> dict[str, Any]:
        """Search and list files using Drive query syntax."""
        params = _query(
            q=q,
            fields=fields or FILE_LIST_FIELDS,
            pageSize=page_size,
            pageToken=page_token,
            orderBy=order_by,
            spaces=spaces,
            corpora=corpora,
            driveId=drive_id,
            includeItemsFromAllDrives=include_items_from_all_drives,
            supportsAllDrives=supports_all_drives,
        )
        return await self.request("GET", "/files", params=params)

    async def get_file(
        self,
        file_id: str,
        *,
        fields: str | None = None,
        supports_all_drives: bool | None = None,
    ) -> dict[str, Any]:
        """Get file metadata, all fields unless a projection is given."""
        params = _query(fields=fields or ALL_FIELDS, supportsAllDrives=supports_all_drives)
        return await self.request("GET", f"/files/{_segment(file_id)}", params=params)

    async def read_file(self, file_id: str) -> dict[str, str]:
        """Download file content.

        Text-like content is returned in full. Binary content is measured and
        replaced by a placeholder naming its MIME type and size.

        Args:
            file_id: ID of the file to download.

        Returns:
            Mapping with ``content`` and ``mimeType``.
        """
        response = await self._download(f"/files/{_segment(file_id)}", {"alt": "media"})
        mime_type = response.headers.get("content-type", "application/octet-stream")

        if is_text_mime_type(mime_type):
            return {"content": response.text, "mimeType": mime_type}

        size = len(response.content)
        return {"content": binary_file_placeholder(mime_type, size), "mimeType": mime_type}

    async def create_file(
        self,
        name: str,
        *,
        mime_type: str | None = None,
        parents: list[str] | None = None,
        description: str | None = None,
        starred: bool | None = None,
        properties: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Create a file (metadata only)."""
        body = _body(
            name=name,
            mimeType=mime_type,
            parents=parents,
            description=description,
            starred=starred,
            properties=properties,
        )
        return await self.request("POST", "/files", body=body, params={"fields": ALL_FIELDS})

    async def update_file(
        self,
        file_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        mime_type: str | None = None,
        starred: bool | None = None,
        trashed: bool | None = None,
        add_parents: str | None = None,
        remove_parents: str | None = None,
        properties: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Update file metadata; moves use add_parents/remove_parents."""
        body = _body(
            name=name,
            description=description,
            mimeType=mime_type,
            starred=starred,
            trashed=trashed,
            properties=properties,
        )
        params = _query(fields=ALL_FIELDS, addParents=add_parents, removeParents=remove_parents)
        return await self.request(
            "PATCH", f"/files/{_segment(file_id)}", body=body, params=params
        )

    async def copy_file(
        self,
        file_id: str,
        *,
        name: str | None = None,
        parents: list[str] | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Copy a file."""
        body = _body(name=name, parents=parents, description=description)
        return await self.request(
            "POST", f"/files/{_segment(file_id)}/copy", body=body, params={"fields": ALL_FIELDS}
        )

    async def delete_file(
        self, file_id: str, *, supports_all_drives: bool | None = None
    ) -> dict[str, Any]:
        """Permanently delete a file, bypassing the trash."""
        params = _query(supportsAllDrives=supports_all_drives)
        return await self.request("DELETE", f"/files/{_segment(file_id)}", params=params)

    async def export_file(self, file_id: str, mime_type: str) -> dict[str, str]:
        """Export a Google Workspace file to another format.

        The requested export MIME type decides whether the content is
        returned as text or replaced by a placeholder.

        Args:
            file_id: ID of the Google Workspace file.
            mime_type: Target export MIME type.

        Returns:
            Mapping with ``content`` and ``mimeType``.
        """
        response = await self._download(
            f"/files/{_segment(file_id)}/export", {"mimeType": mime_type}
        )

        if is_text_mime_type(mime_type):
            return {"content": response.text, "mimeType": mime_type}

        size = len(response.content)
        return {"content": binary_export_placeholder(mime_type, size), "mimeType": mime_type}

    async def create_folder(
        self,
        name: str,
        *,
        parents: list[str] | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Create a folder."""
        return await self.create_file(
            name, mime_type=FOLDER_MIME_TYPE, parents=parents, description=description
        )

    async def empty_trash(self) -> dict[str, Any]:
        """Permanently delete every trashed file of the user."""
        return await self.request("DELETE", "/files/trash")

    # =========================================================================
    # Permissions
    # =========================================================================

    async def list_permissions(
        self,
        file_id: str,
        *,
        fields: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
        supports_all_drives: bool | None = None,
    ) -> dict[str, Any]:
        """List sharing permissions on a file or folder."""
        params = _query(
            fields=fields or PERMISSION_LIST_FIELDS,
            pageSize=page_size,
            pageToken=page_token,
            supportsAllDrives=supports_all_drives,
        )
        return await self.request(
            "GET", f"/files/{_segment(file_id)}/permissions", params=params
        )

    async def share_file(
        self,
        file_id: str,
        *,
        permission_type: str,
        role: str,
        email_address: str | None = None,
        domain: str | None = None,
        send_notification_email: bool | None = None,
        email_message: str | None = None,
        transfer_ownership: bool | None = None,
        supports_all_drives: bool | None = None,
    ) -> dict[str, Any]:
        """Create a permission on a file or folder.

        Args:
            file_id: ID of the file or folder.
            permission_type: "user", "group", "domain" or "anyone".
            role: Access level such as "reader" or "writer".
            email_address: Grantee address for user and group permissions.
            domain: Grantee domain for domain permissions.
            send_notification_email: Whether Google emails the grantee.
            email_message: Custom text for the notification email.
            transfer_ownership: Transfer ownership (role must be "owner").
            supports_all_drives: Whether the caller supports shared drives.

        Returns:
            The created permission resource.
        """
        body = _body(type=permission_type, role=role, emailAddress=email_address, domain=domain)
        params = _query(
            sendNotificationEmail=send_notification_email,
            emailMessage=email_message,
            transferOwnership=transfer_ownership,
            supportsAllDrives=supports_all_drives,
        )
        return await self.request(
            "POST", f"/files/{_segment(file_id)}/permissions", body=body, params=params
        )

    async def unshare_file(
        self,
        file_id: str,
        permission_id: str,
        *,
        supports_all_drives: bool | None = None,
    ) -> dict[str, Any]:
        """Delete a permission, revoking access."""
        params = _query(supportsAllDrives=supports_all_drives)
        return await self.request(
            "DELETE",
            f"/files/{_segment(file_id)}/permissions/{_segment(permission_id)}",
            params=params,
        )

    # =========================================================================
    # Comments and replies
    # =========================================================================

    async def list_comments(
        self,
        file_id: str,
        *,
        fields: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
        start_modified_time: str | None = None,
        include_deleted: bool | None = None,
    ) -> dict[str, Any]:
        """List comments on a file."""
        params = _query(
            fields=fields or COMMENT_LIST_FIELDS,
            pageSize=page_size,
            pageToken=page_token,
            startModifiedTime=start_modified_time,
            includeDeleted=include_deleted,
        )
        return await self.request("GET", f"/files/{_segment(file_id)}/comments", params=params)

    async def create_comment(
        self,
        file_id: str,
        content: str,
        *,
        anchor: str | None = None,
        quoted_file_content: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Add a comment to a file."""
        body = _body(content=content, anchor=anchor, quotedFileContent=quoted_file_content)
        return await self.request(
            "POST",
            f"/files/{_segment(file_id)}/comments",
            body=body,
            params={"fields": ALL_FIELDS},
        )

    async def delete_comment(self, file_id: str, comment_id: str) -> dict[str, Any]:
        """Delete a comment."""
        return await self.request(
            "DELETE", f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}"
        )

    async def list_replies(
        self,
        file_id: str,
        comment_id: str,
        *,
        fields: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
        include_deleted: bool | None = None,
    ) -> dict[str, Any]:
        """List replies to a comment."""
        params = _query(
            fields=fields or REPLY_LIST_FIELDS,
            pageSize=page_size,
            pageToken=page_token,
            includeDeleted=include_deleted,
        )
        return await self.request(
            "GET",
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies",
            params=params,
        )

    async def create_reply(
        self,
        file_id: str,
        comment_id: str,
        content: str,
        *,
        action: str | None = None,
    ) -> dict[str, Any]:
        """Reply to a comment; action "resolve" or "reopen" changes its state."""
        return await self.request(
            "POST",
            f"/files/{_segment(file_id)}/comments/{_segment(comment_id)}/replies",
            body=_body(content=content, action=action),
            params={"fields": ALL_FIELDS},
        )

    # =========================================================================
    # Shared drives
    # =========================================================================

    async def list_drives(
        self,
        *,
        fields: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
        q: str | None = None,
    ) -> dict[str, Any]:
        """List shared drives the user can access."""
        params = _query(
            fields=fields or DRIVE_LIST_FIELDS,
            pageSize=page_size,
            pageToken=page_token,
            q=q,
        )
        return await self.request("GET", "/drives", params=params)

    async def create_drive(self, name: str, *, theme_id: str | None = None) -> dict[str, Any]:
        """Create a shared drive.

        A fresh request ID is generated per call so that a retried request
        cannot create a duplicate drive.
        """
        request_id = str(uuid.uuid4())
        return await self.request(
            "POST",
            "/drives",
            body=_body(name=name, themeId=theme_id),
            params={"requestId": request_id},
        )

    async def delete_drive(self, drive_id: str) -> dict[str, Any]:
        """Delete an empty shared drive."""
        return await self.request("DELETE", f"/drives/{_segment(drive_id)}")

    # =========================================================================
    # Revisions and account
    # =========================================================================

    async def list_revisions(
        self,
        file_id: str,
        *,
        fields: str | None = None,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        """List a file's revision history."""
        params = _query(
            fields=fields or REVISION_LIST_FIELDS,
            pageSize=page_size,
            pageToken=page_token,
        )
        return await self.request("GET", f"/files/{_segment(file_id)}/revisions", params=params)

    async def about(self, *, fields: str | None = None) -> dict[str, Any]:
        """Get user, quota and capability information."""
        return await self.request("GET", "/about", params={"fields": fields or ABOUT_FIELDS})
