"""Unit tests for DriveClient.

Tests cover request construction (paths, query parameters, bodies, default
projections), response handling, and error propagation against a fake
Google backend.
"""

import json

import pytest

from gdrive_mcp.drive.client import (
    ABOUT_FIELDS,
    ALL_FIELDS,
    COMMENT_LIST_FIELDS,
    DRIVE_API_BASE,
    DRIVE_LIST_FIELDS,
    FILE_LIST_FIELDS,
    FOLDER_MIME_TYPE,
    PERMISSION_LIST_FIELDS,
    REPLY_LIST_FIELDS,
    REVISION_LIST_FIELDS,
    DriveClient,
)
from gdrive_mcp.errors import ApiError, AuthError, DriveMCPError

from conftest import FakeDriveAPI


def body_of(request) -> dict:
    return json.loads(request.content) if request.content else {}


@pytest.mark.unit
class TestDriveClientRequest:
    """Tests for DriveClient.request()."""

    @pytest.mark.asyncio
    async def test_should_send_bearer_and_json_headers(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify requests carry the access token and JSON content type."""
        await drive_client.request("GET", "/about", params={"fields": "user"})

        request = fake_api.api_requests[0]
        assert request.headers["Authorization"] == "Bearer access-1"
        assert request.headers["Content-Type"] == "application/json"
        assert str(request.url) == f"{DRIVE_API_BASE}/about?fields=user"

    @pytest.mark.asyncio
    async def test_should_return_parsed_json(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify JSON responses are decoded."""
        fake_api.respond("GET", "/files/abc", json={"id": "abc", "name": "notes.txt"})

        result = await drive_client.request("GET", "/files/abc")

        assert result == {"id": "abc", "name": "notes.txt"}

    @pytest.mark.asyncio
    async def test_should_return_empty_object_for_no_content(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify a 204 response yields an empty mapping."""
        fake_api.respond("DELETE", "/files/abc", status=204)

        result = await drive_client.request("DELETE", "/files/abc")

        assert result == {}

    @pytest.mark.asyncio
    async def test_should_return_raw_text_with_mime_type(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify raw mode returns body text and content type."""
        fake_api.respond(
            "GET", "/files/abc", content=b"hello", headers={"Content-Type": "text/csv"}
        )

        result = await drive_client.request("GET", "/files/abc", raw=True)

        assert result == {"content": "hello", "mimeType": "text/csv"}

    @pytest.mark.asyncio
    async def test_should_raise_api_error_with_status_and_body(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify non-success responses raise ApiError carrying the raw body."""
        fake_api.respond("GET", "/files/missing", status=404, json={"error": "notFound"})

        with pytest.raises(ApiError) as exc_info:
            await drive_client.get_file("missing")

        assert exc_info.value.status_code == 404
        assert "notFound" in exc_info.value.body
        assert str(exc_info.value).startswith("Google Drive API Error (404): ")

    @pytest.mark.asyncio
    async def test_should_not_call_api_when_refresh_fails(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify an auth failure aborts before any Drive request."""
        fake_api.token_status = 401
        fake_api.token_body = "unauthorized_client"

        with pytest.raises(AuthError):
            await drive_client.about()

        assert fake_api.api_requests == []

    @pytest.mark.asyncio
    async def test_should_reuse_token_across_requests(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify several operations share one token refresh."""
        await drive_client.about()
        await drive_client.search_files()
        await drive_client.list_drives()

        assert fake_api.token_calls == 1
        assert len(fake_api.api_requests) == 3

    @pytest.mark.asyncio
    async def test_should_percent_encode_path_segments(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify identifiers with slashes or question marks stay one segment."""
        await drive_client.get_file("a/b?c")

        request = fake_api.api_requests[0]
        assert request.url.raw_path.startswith(b"/drive/v3/files/a%2Fb%3Fc?")
        assert request.url.params["fields"] == ALL_FIELDS


@pytest.mark.unit
class TestDriveClientDefaultProjections:
    """Tests for default fields projections on list and get operations."""

    @pytest.mark.parametrize(
        ("operation", "args", "expected"),
        [
            ("search_files", (), FILE_LIST_FIELDS),
            ("get_file", ("f1",), ALL_FIELDS),
            ("list_permissions", ("f1",), PERMISSION_LIST_FIELDS),
            ("list_comments", ("f1",), COMMENT_LIST_FIELDS),
            ("list_replies", ("f1", "c1"), REPLY_LIST_FIELDS),
            ("list_drives", (), DRIVE_LIST_FIELDS),
            ("list_revisions", ("f1",), REVISION_LIST_FIELDS),
            ("about", (), ABOUT_FIELDS),
        ],
    )
    @pytest.mark.asyncio
    async def test_should_apply_default_projection(
        self,
        drive_client: DriveClient,
        fake_api: FakeDriveAPI,
        operation: str,
        args: tuple,
        expected: str,
    ) -> None:
        """Verify fields defaults to the operation's projection when absent."""
        await getattr(drive_client, operation)(*args)

        assert fake_api.api_requests[0].url.params["fields"] == expected

    @pytest.mark.asyncio
    async def test_should_use_caller_projection(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify an explicit projection replaces the default."""
        await drive_client.search_files(fields="files(id)")

        assert fake_api.api_requests[0].url.params["fields"] == "files(id)"


@pytest.mark.unit
class TestDriveClientFiles:
    """Tests for file operations."""

    @pytest.mark.asyncio
    async def test_should_search_with_query_and_order(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify search sends q, orderBy and pageSize and nothing unset."""
        fake_api.respond("GET", "/files", json={"files": [{"id": "1"}]})

        result = await drive_client.search_files(
            q="name contains 'report'", page_size=10, order_by="modifiedTime desc"
        )

        assert result == {"files": [{"id": "1"}]}
        request = fake_api.api_requests[0]
        assert request.method == "GET"
        assert request.url.path == "/drive/v3/files"
        assert dict(request.url.params) == {
            "q": "name contains 'report'",
            "fields": FILE_LIST_FIELDS,
            "pageSize": "10",
            "orderBy": "modifiedTime desc",
        }

    @pytest.mark.asyncio
    async def test_should_render_booleans_as_lowercase(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify explicit False is sent rather than omitted."""
        await drive_client.search_files(
            include_items_from_all_drives=False, supports_all_drives=True
        )

        params = fake_api.api_requests[0].url.params
        assert params["includeItemsFromAllDrives"] == "false"
        assert params["supportsAllDrives"] == "true"

    @pytest.mark.asyncio
    async def test_should_create_file_with_only_present_fields(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify absent optional fields never appear in the body."""
        await drive_client.create_file("draft.txt", parents=["folder1"])

        request = fake_api.api_requests[0]
        assert request.method == "POST"
        assert request.url.path == "/drive/v3/files"
        assert request.url.params["fields"] == ALL_FIELDS
        assert body_of(request) == {"name": "draft.txt", "parents": ["folder1"]}

    @pytest.mark.asyncio
    async def test_should_send_explicit_false_and_empty_values(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify False and empty string are present values."""
        await drive_client.create_file("draft.txt", starred=False, description="")

        assert body_of(fake_api.api_requests[0]) == {
            "name": "draft.txt",
            "starred": False,
            "description": "",
        }

    @pytest.mark.asyncio
    async def test_should_move_file_with_parent_parameters(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify update puts parents in the query and metadata in the body."""
        await drive_client.update_file(
            "f1", name="renamed", trashed=False, add_parents="new", remove_parents="old"
        )

        request = fake_api.api_requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/drive/v3/files/f1"
        assert dict(request.url.params) == {
            "fields": ALL_FIELDS,
            "addParents": "new",
            "removeParents": "old",
        }
        assert body_of(request) == {"name": "renamed", "trashed": False}

    @pytest.mark.asyncio
    async def test_should_copy_file(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify copy posts to the copy endpoint."""
        await drive_client.copy_file("f1", name="Copy")

        request = fake_api.api_requests[0]
        assert request.method == "POST"
        assert request.url.path == "/drive/v3/files/f1/copy"
        assert body_of(request) == {"name": "Copy"}

    @pytest.mark.asyncio
    async def test_should_create_folder_with_folder_mime_type(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify folders are files with the folder MIME type."""
        await drive_client.create_folder("Reports")

        assert body_of(fake_api.api_requests[0]) == {
            "name": "Reports",
            "mimeType": FOLDER_MIME_TYPE,
        }

    @pytest.mark.asyncio
    async def test_should_delete_file(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify delete issues DELETE with no query parameters by default."""
        fake_api.respond("DELETE", "/files/f1", status=204)

        result = await drive_client.delete_file("f1")

        request = fake_api.api_requests[0]
        assert result == {}
        assert request.method == "DELETE"
        assert request.url.query == b""

    @pytest.mark.asyncio
    async def test_should_empty_trash(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify empty_trash issues one DELETE on the trash collection."""
        fake_api.respond("DELETE", "/files/trash", status=204)

        await drive_client.empty_trash()

        assert [(r.method, r.url.path) for r in fake_api.api_requests] == [
            ("DELETE", "/drive/v3/files/trash")
        ]


@pytest.mark.unit
class TestDriveClientContent:
    """Tests for read_file and export_file content handling."""

    @pytest.mark.asyncio
    async def test_should_return_text_content(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify text downloads are returned whole."""
        fake_api.respond(
            "GET",
            "/files/f1",
            content=b"a,b\n1,2\n",
            headers={"Content-Type": "text/csv; charset=utf-8"},
        )

        result = await drive_client.read_file("f1")

        assert result == {"content": "a,b\n1,2\n", "mimeType": "text/csv; charset=utf-8"}
        request = fake_api.api_requests[0]
        assert request.url.params["alt"] == "media"
        assert "Content-Type" not in request.headers

    @pytest.mark.asyncio
    async def test_should_replace_binary_content_with_placeholder(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify binary downloads report MIME type and byte size only."""
        fake_api.respond(
            "GET", "/files/img", content=b"\x89PNG" + b"\x00" * 96,
            headers={"Content-Type": "image/png"},
        )

        result = await drive_client.read_file("img")

        assert result["mimeType"] == "image/png"
        assert result["content"].startswith("[Binary file: image/png, 100 bytes.")

    @pytest.mark.asyncio
    async def test_should_treat_missing_content_type_as_binary(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify a download without Content-Type is reported as octet-stream."""
        fake_api.respond("GET", "/files/blob", content=b"\x00\x01\x02\x03")

        result = await drive_client.read_file("blob")

        assert result == {
            "content": (
                "[Binary file: application/octet-stream, 4 bytes. "
                "Use gd_export_file for Google Workspace files or download via webContentLink.]"
            ),
            "mimeType": "application/octet-stream",
        }

    @pytest.mark.asyncio
    async def test_should_export_text_format(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify text exports are returned with the requested MIME type."""
        fake_api.respond("GET", "/files/doc/export", content=b"Hello doc")

        result = await drive_client.export_file("doc", "text/plain")

        assert result == {"content": "Hello doc", "mimeType": "text/plain"}
        assert fake_api.api_requests[0].url.params["mimeType"] == "text/plain"

    @pytest.mark.asyncio
    async def test_should_replace_binary_export_with_placeholder(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify binary exports are summarized by MIME type and size."""
        fake_api.respond("GET", "/files/doc/export", content=b"%PDF" + b"0" * 20)

        result = await drive_client.export_file("doc", "application/pdf")

        assert result == {
            "content": (
                "[Binary export: application/pdf, 24 bytes. "
                "For binary formats like PDF/DOCX, use the webViewLink to download.]"
            ),
            "mimeType": "application/pdf",
        }


@pytest.mark.unit
class TestDriveClientSharing:
    """Tests for permission, comment and reply operations."""

    @pytest.mark.asyncio
    async def test_should_share_with_user_and_notification(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify grantee goes in the body and notification flags in the query."""
        fake_api.respond(
            "POST", "/files/F/permissions", json={"id": "perm1", "role": "writer"}
        )

        result = await drive_client.share_file(
            "F",
            permission_type="user",
            role="writer",
            email_address="a@x.com",
            send_notification_email=False,
        )

        assert result == {"id": "perm1", "role": "writer"}
        request = fake_api.api_requests[0]
        assert request.method == "POST"
        assert request.url.path == "/drive/v3/files/F/permissions"
        assert body_of(request) == {"type": "user", "role": "writer", "emailAddress": "a@x.com"}
        assert dict(request.url.params) == {"sendNotificationEmail": "false"}

    @pytest.mark.asyncio
    async def test_should_unshare_by_permission_id(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify unshare deletes the permission resource."""
        await drive_client.unshare_file("F", "perm1")

        request = fake_api.api_requests[0]
        assert request.method == "DELETE"
        assert request.url.path == "/drive/v3/files/F/permissions/perm1"

    @pytest.mark.asyncio
    async def test_should_create_comment_with_quoted_content(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify comment body includes quoted content when given."""
        await drive_client.create_comment(
            "F", "Looks good", quoted_file_content={"mimeType": "text/plain", "value": "intro"}
        )

        request = fake_api.api_requests[0]
        assert request.url.path == "/drive/v3/files/F/comments"
        assert request.url.params["fields"] == ALL_FIELDS
        assert body_of(request) == {
            "content": "Looks good",
            "quotedFileContent": {"mimeType": "text/plain", "value": "intro"},
        }

    @pytest.mark.asyncio
    async def test_should_resolve_comment_with_reply_action(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify reply action is sent in the body."""
        await drive_client.create_reply("F", "c1", "Done", action="resolve")

        request = fake_api.api_requests[0]
        assert request.url.path == "/drive/v3/files/F/comments/c1/replies"
        assert body_of(request) == {"content": "Done", "action": "resolve"}

    @pytest.mark.asyncio
    async def test_should_list_comments_with_filters(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify comment listing forwards paging and filters."""
        await drive_client.list_comments(
            "F", page_size=5, start_modified_time="2024-01-01T00:00:00Z", include_deleted=True
        )

        assert dict(fake_api.api_requests[0].url.params) == {
            "fields": COMMENT_LIST_FIELDS,
            "pageSize": "5",
            "startModifiedTime": "2024-01-01T00:00:00Z",
            "includeDeleted": "true",
        }


@pytest.mark.unit
class TestDriveClientSharedDrives:
    """Tests for shared drive operations."""

    @pytest.mark.asyncio
    async def test_should_create_drive_with_fresh_request_id(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify each create_drive call uses a new requestId."""
        await drive_client.create_drive("Team")
        await drive_client.create_drive("Team", theme_id="abacus")

        first, second = fake_api.api_requests
        assert first.url.params["requestId"] != second.url.params["requestId"]
        assert body_of(first) == {"name": "Team"}
        assert body_of(second) == {"name": "Team", "themeId": "abacus"}

    @pytest.mark.asyncio
    async def test_should_delete_drive(
        self, drive_client: DriveClient, fake_api: FakeDriveAPI
    ) -> None:
        """Verify delete_drive targets the drive resource."""
        await drive_client.delete_drive("d1")

        request = fake_api.api_requests[0]
        assert (request.method, request.url.path) == ("DELETE", "/drive/v3/drives/d1")


@pytest.mark.unit
class TestDriveClientLifecycle:
    """Tests for client resource management."""

    @pytest.mark.asyncio
    async def test_should_create_pooled_client_lazily(self, credentials) -> None:
        """Verify the HTTP client is created on demand and reused."""
        client = DriveClient(credentials, timeout=12.5)

        first = await client._get_http_client()
        second = await client._get_http_client()

        assert first is second
        assert first.timeout.read == 12.5
        assert first.timeout.connect == 10.0
        await client.close()

    @pytest.mark.asyncio
    async def test_should_release_client_on_close(
        self, credentials, fake_api: FakeDriveAPI
    ) -> None:
        """Verify close() drops the HTTP client."""
        async with DriveClient(credentials, http_client=fake_api.client()) as client:
            await client.about()

        assert client._http_client is None

    @pytest.mark.asyncio
    async def test_should_refuse_requests_after_close(
        self, credentials, fake_api: FakeDriveAPI, fresh_token
    ) -> None:
        """Verify a closed client raises instead of opening a new pool."""
        client = DriveClient(credentials, http_client=fake_api.client())
        client.tokens._token = fresh_token
        await client.close()

        with pytest.raises(DriveMCPError, match="Drive client is closed"):
            await client.about()

        assert client._http_client is None
        assert fake_api.requests == []
