"""Exception types raised by the Drive client and tool dispatcher.

None of these are caught and recovered internally. They propagate to the
MCP layer, which reports them to the calling agent as failed tool results.
"""

from pydantic import ValidationError


class DriveMCPError(Exception):
    """Base class for all gdrive-mcp errors."""


class ConfigurationError(DriveMCPError):
    """Credentials or settings are missing or unusable."""


class AuthError(DriveMCPError):
    """The OAuth token endpoint rejected a refresh request.

    Attributes:
        status_code: HTTP status returned by the token endpoint.
        body: Raw response body text.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"OAuth token refresh failed ({status_code}): {body}")


class ApiError(DriveMCPError):
    """The Drive REST API returned a non-success status.

    Attributes:
        status_code: HTTP status returned by the API.
        body: Raw response body text.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Google Drive API Error ({status_code}): {body}")


class DispatchError(DriveMCPError):
    """A tool call could not be routed to a client operation."""


class InvalidArgumentsError(DispatchError):
    """Tool arguments failed validation against the tool's argument model."""

    def __init__(self, tool_name: str, error: ValidationError) -> None:
        self.tool_name = tool_name
        self.errors = error.errors()
        details = "; ".join(
            f"{'.'.join(str(part) for part in item['loc']) or 'arguments'}: {item['msg']}"
            for item in self.errors
        )
        super().__init__(f"Invalid arguments for {tool_name}: {details}")
