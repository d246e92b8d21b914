"""Version information for gdrive-mcp."""

from importlib.metadata import PackageNotFoundError, version


def _get_version() -> str:
    """Get version from installed package metadata or fallback to hardcoded."""
    try:
        return version("gdrive-mcp")
    except PackageNotFoundError:
        return "1.0.0"


__version__ = _get_version()
