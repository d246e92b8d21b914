"""Command-line interface for gdrive-mcp."""

import asyncio
import logging
import sys
from pathlib import Path

import click
import httpx

from gdrive_mcp.__version__ import __version__
from gdrive_mcp.config import CONFIG_KEYS, DriveConfig, load_config_file, resolve_config
from gdrive_mcp.errors import DriveMCPError

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _load_configs(config_path: Path | None) -> tuple[DriveConfig, DriveConfig | None]:
    """Load environment settings and the optional config file, exiting on errors."""
    file_config = None
    if config_path is not None:
        try:
            file_config = load_config_file(config_path)
        except DriveMCPError as e:
            click.echo(f"❌ {e}", err=True)
            sys.exit(1)
    return DriveConfig.from_environ(), file_config


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity (logs go to stderr)",
)
def main(log_level: str) -> None:
    """Google Drive MCP Server - Connect AI agents to Google Drive.

    Provides 23 tools across:
    - Files (search, read, export, create, update, copy, delete, trash)
    - Permissions (list, share, unshare)
    - Comments and replies
    - Shared drives
    - Revisions and account info
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.option("--http", "use_http", is_flag=True, help="Serve streamable HTTP instead of stdio")
@click.option("--host", default="0.0.0.0", show_default=True, help="HTTP bind address")
@click.option("--port", envvar="PORT", default=3000, show_default=True, type=int, help="HTTP port")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REFRESH_TOKEN",
)
def serve(use_http: bool, host: str, port: int, config_path: Path | None) -> None:
    """Start the MCP server.

    Uses stdio by default, which is what desktop MCP clients launch. With
    --http, serves POST /mcp (streamable HTTP) and a GET / health check.

    Credentials are read from the environment and the config file. If they
    are missing the server still starts; tool calls must then supply them
    as query parameters (HTTP) or tool arguments.
    """
    from gdrive_mcp.server import GoogleDriveServer
    from gdrive_mcp.server.tools import TOOLS

    env_config, file_config = _load_configs(config_path)
    drive_server = GoogleDriveServer(config=env_config, file_config=file_config)

    if not drive_server.static_config.has_credentials:
        click.echo(
            "⚠️  OAuth not configured (set GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, "
            "GOOGLE_REFRESH_TOKEN)",
            err=True,
        )
    click.echo(f"Tools available: {len(TOOLS)}", err=True)

    try:
        if use_http:
            from gdrive_mcp.server.http_app import run_http

            click.echo(f"Starting Google Drive MCP server on http://{host}:{port}/mcp", err=True)
            run_http(drive_server, host=host, port=port)
        else:
            click.echo("Starting Google Drive MCP server on stdio...", err=True)
            asyncio.run(drive_server.run())
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)


@main.command()
@click.option("--client-id", envvar="GOOGLE_CLIENT_ID", help="Google OAuth client ID")
@click.option("--client-secret", envvar="GOOGLE_CLIENT_SECRET", help="Google OAuth client secret")
@click.option("--port", default=8080, show_default=True, type=int, help="Local redirect port")
def auth(client_id: str | None, client_secret: str | None, port: int) -> None:
    """Obtain a Drive refresh token through the browser consent flow.

    The refresh token is printed, not stored. Export it as
    GOOGLE_REFRESH_TOKEN for the server to use.

    Requires:
    - GOOGLE_CLIENT_ID environment variable or --client-id option
    - GOOGLE_CLIENT_SECRET environment variable or --client-secret option
    """
    if not client_id or not client_secret:
        click.echo("❌ Error: OAuth client credentials required")
        click.echo("")
        click.echo("Set environment variables:")
        click.echo("  export GOOGLE_CLIENT_ID='your-client-id'")
        click.echo("  export GOOGLE_CLIENT_SECRET='your-client-secret'")
        click.echo("")
        click.echo("Or pass as options:")
        click.echo("  gdrive-mcp auth --client-id=... --client-secret=...")
        sys.exit(1)

    from gdrive_mcp.auth.consent import obtain_refresh_token

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        refresh_token = asyncio.run(obtain_refresh_token(client_id, client_secret, port=port))
    except Exception as e:
        click.echo(f"❌ Authentication failed: {e}")
        sys.exit(1)

    click.echo("✓ Authentication successful!")
    click.echo("")
    click.echo("Export the refresh token:")
    click.echo(f"  export GOOGLE_REFRESH_TOKEN='{refresh_token}'")


async def _check_connection(config: DriveConfig) -> dict:
    """Refresh a token and fetch the user's about record."""
    from gdrive_mcp.drive import DriveClient

    async with DriveClient(config.credentials(), timeout=config.request_timeout) as client:
        return await client.about(fields="user(displayName,emailAddress)")


@main.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file to include",
)
@click.option("--check", is_flag=True, help="Refresh a token and call the Drive API")
def doctor(config_path: Path | None, check: bool) -> None:
    """Check configuration and, optionally, live API access.

    Verifies:
    1. OAuth credentials configured
    2. With --check: token refresh and a Drive API call succeed
    """
    env_config, file_config = _load_configs(config_path)
    config = resolve_config(env_config, file_config)

    click.echo("Google Drive MCP Status:")
    click.echo("")
    click.echo("Configuration:")
    for field_name, key in CONFIG_KEYS.items():
        if field_name == "request_timeout":
            click.echo(f"  Request timeout: {config.request_timeout}s")
        elif getattr(config, field_name):
            click.echo(f"  ✓ {key} set")
        else:
            click.echo(f"  ❌ {key} missing")
    click.echo("")

    if not config.has_credentials:
        click.echo("❌ Setup required. Run 'gdrive-mcp auth' to obtain a refresh token.")
        sys.exit(1)

    if check:
        click.echo("Connection:")
        try:
            about = asyncio.run(_check_connection(config))
        except (DriveMCPError, httpx.HTTPError) as e:
            click.echo(f"  ❌ {e}")
            sys.exit(1)
        user = about.get("user", {})
        click.echo(f"  ✓ Connected as {user.get('displayName')} <{user.get('emailAddress')}>")
        click.echo("")

    click.echo("✓ Ready to use!")


@main.command()
def tools() -> None:
    """List the available MCP tools by category."""
    from gdrive_mcp.server.tools import TOOL_CATEGORIES

    for category, category_tools in TOOL_CATEGORIES.items():
        click.echo(f"{category} ({len(category_tools)}):")
        for tool in category_tools:
            title = tool.annotations.title if tool.annotations else ""
            click.echo(f"  {tool.name:<22} {title}")


if __name__ == "__main__":
    main()
