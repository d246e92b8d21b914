"""Configuration loading for gdrive-mcp.

Credentials can come from several places, checked in this order:

1. Process environment (GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET,
   GOOGLE_REFRESH_TOKEN, GDRIVE_MCP_TIMEOUT)
2. Query parameters of the HTTP request carrying the MCP message
3. A YAML config file passed with ``--config``
4. The tool call arguments themselves

The first non-empty value wins for each field.
"""

import logging
import os
from collections.abc import Mapping
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from gdrive_mcp.auth.models import DriveCredentials
from gdrive_mcp.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Field name -> external key used in env, query strings and config files
CONFIG_KEYS = {
    "client_id": "GOOGLE_CLIENT_ID",
    "client_secret": "GOOGLE_CLIENT_SECRET",
    "refresh_token": "GOOGLE_REFRESH_TOKEN",
    "request_timeout": "GDRIVE_MCP_TIMEOUT",
}

CREDENTIAL_FIELDS = ("client_id", "client_secret", "refresh_token")

MISSING_CREDENTIALS_MESSAGE = (
    "GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, and GOOGLE_REFRESH_TOKEN are all required."
)


class DriveConfig(BaseModel):
    """Settings for one Drive connection.

    Attributes:
        client_id: Google OAuth client ID.
        client_secret: Google OAuth client secret.
        refresh_token: OAuth refresh token for the Drive scope.
        request_timeout: Per-request timeout in seconds.
    """

    client_id: str | None = Field(default=None, description="OAuth client ID")
    client_secret: str | None = Field(default=None, description="OAuth client secret")
    refresh_token: str | None = Field(default=None, description="OAuth refresh token")
    request_timeout: float = Field(default=30.0, gt=0, description="Request timeout (seconds)")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DriveConfig":
        """Build a config from a mapping keyed by external or field names.

        Empty values are treated as unset. Unrelated keys are ignored.

        Args:
            values: Environment, query parameters, file contents or tool
                arguments.

        Returns:
            DriveConfig with only the present fields set.
        """
        found: dict[str, Any] = {}
        for field_name, external_key in CONFIG_KEYS.items():
            value = values.get(external_key)
            if value in (None, ""):
                value = values.get(field_name)
            if value not in (None, ""):
                found[field_name] = value
        return cls(**found)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "DriveConfig":
        """Build a config from the process environment."""
        return cls.from_mapping(os.environ if environ is None else environ)

    @property
    def has_credentials(self) -> bool:
        """True when all three credential values are present."""
        return all(getattr(self, name) for name in CREDENTIAL_FIELDS)

    def credentials(self) -> DriveCredentials:
        """Get the credentials as a validated model.

        Raises:
            ConfigurationError: If any credential value is missing.
        """
        if not self.has_credentials:
            raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)
        return DriveCredentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            refresh_token=self.refresh_token,
        )


def load_config_file(path: Path) -> DriveConfig:
    """Load settings from a YAML config file.

    Args:
        path: Path to a YAML mapping.

    Returns:
        DriveConfig with the values present in the file.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config file {path}")
    return DriveConfig.from_mapping(data)


def resolve_config(*layers: DriveConfig | None) -> DriveConfig:
    """Merge config layers, earlier layers taking precedence.

    A field counts as set in a layer only if it was explicitly provided and
    is non-empty.

    Args:
        layers: Configs in precedence order. None entries are skipped.

    Returns:
        Merged DriveConfig.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer is None:
            continue
        for field_name in layer.model_fields_set:
            value = getattr(layer, field_name)
            if field_name not in merged and value not in (None, ""):
                merged[field_name] = value
    return DriveConfig(**merged)


# Set per HTTP request from the /mcp query string
request_config: ContextVar[DriveConfig | None] = ContextVar("request_config", default=None)
