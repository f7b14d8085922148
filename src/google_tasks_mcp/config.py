"""
Server configuration for google-tasks-mcp.

Settings are resolved in layers; a later layer wins:

- built-in defaults
- a TOML file (google-tasks-mcp.toml or .google-tasks-mcp.toml)
- environment variables

A ``.env`` file in the working directory is loaded before the environment is
read, without overriding variables that are already set.

Environment variables:
- CLIENT_ID: OAuth client ID (required)
- CLIENT_SECRET: OAuth client secret (required)
- REDIRECT_URI: OAuth redirect URI (required)
- ACCESS_TOKEN: OAuth access token (required)
- REFRESH_TOKEN: OAuth refresh token (required)
- GOOGLE_TASKS_MCP_TOKEN_URI: Token endpoint used for refreshes
- GOOGLE_TASKS_MCP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- GOOGLE_TASKS_MCP_LOG_FORMAT: "structured" (JSON lines) or "human"
- GOOGLE_TASKS_MCP_SERVER_NAME: Name advertised to MCP clients
- GOOGLE_TASKS_MCP_CONFIG_FILE: Path to TOML config file

Credential Security:
- Tokens are only ever read from process configuration, never from tool input
- Missing credentials are a fatal startup condition (see require_credentials)
- Use redact_sensitive_data() before logging anything derived from config
"""

import logging
import os
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from dotenv import find_dotenv, load_dotenv

from google_tasks_mcp.core.errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"

_VALID_LOG_FORMATS = {"structured", "human"}
_DEFAULT_CONFIG_FILES = ("google-tasks-mcp.toml", ".google-tasks-mcp.toml")


def _get_version() -> str:
    """Installed distribution version, or the in-tree one for a source checkout."""
    try:
        return get_package_version("google-tasks-mcp")
    except PackageNotFoundError:
        return "0.1.0"


_PACKAGE_VERSION = _get_version()


@dataclass
class GoogleCredentials:
    """OAuth credentials for the Google Tasks API.

    Attributes:
        client_id: OAuth client ID
        client_secret: OAuth client secret
        redirect_uri: Redirect URI registered for the client
        access_token: Current access token
        refresh_token: Long-lived refresh token used by google-auth
        token_uri: Token endpoint for refreshes
    """

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    access_token: str = ""
    refresh_token: str = ""
    token_uri: str = DEFAULT_TOKEN_URI

    # (attribute, environment variable) pairs that must be non-empty
    REQUIRED_FIELDS = (
        ("client_id", "CLIENT_ID"),
        ("client_secret", "CLIENT_SECRET"),
        ("redirect_uri", "REDIRECT_URI"),
        ("access_token", "ACCESS_TOKEN"),
        ("refresh_token", "REFRESH_TOKEN"),
    )

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "GoogleCredentials":
        """Create credentials from TOML dict (typically [google] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            GoogleCredentials instance
        """
        return cls(
            client_id=str(data.get("client_id", "")),
            client_secret=str(data.get("client_secret", "")),
            redirect_uri=str(data.get("redirect_uri", "")),
            access_token=str(data.get("access_token", "")),
            refresh_token=str(data.get("refresh_token", "")),
            token_uri=str(data.get("token_uri", DEFAULT_TOKEN_URI)),
        )

    def missing_fields(self) -> List[str]:
        """Return the environment names of required fields that are empty."""
        return [
            env_name
            for attr, env_name in self.REQUIRED_FIELDS
            if not str(getattr(self, attr) or "").strip()
        ]


def _normalize_log_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in _VALID_LOG_FORMATS:
        logger.warning(
            "Invalid log format '%s'. Falling back to 'structured'. Valid options: %s",
            value,
            ", ".join(sorted(_VALID_LOG_FORMATS)),
        )
        return "structured"
    return normalized


@dataclass
class ServerConfig:
    """Effective settings for one server or CLI process."""

    google: GoogleCredentials = field(default_factory=GoogleCredentials)

    log_level: str = "INFO"
    log_format: str = "structured"

    server_name: str = "google-tasks-server"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    @classmethod
    def from_env(
        cls, config_file: Optional[str] = None, *, load_env_file: bool = True
    ) -> "ServerConfig":
        """Resolve settings from defaults, then TOML, then the environment.

        ``.env`` in the working directory is read first unless
        ``load_env_file`` is false; it never replaces variables already set.
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        config = cls()

        explicit = config_file or os.environ.get("GOOGLE_TASKS_MCP_CONFIG_FILE")
        if explicit:
            config._load_toml(Path(explicit))
        else:
            found = next((p for p in map(Path, _DEFAULT_CONFIG_FILES) if p.exists()), None)
            if found is not None:
                config._load_toml(found)

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Apply the [google], [logging] and [server] tables of a TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Error loading config file %s: %s", path, e)
            return

        if "google" in data:
            self.google = GoogleCredentials.from_toml_dict(data["google"])

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "format" in log:
                self.log_format = _normalize_log_format(str(log["format"]))

        if "server" in data:
            srv = data["server"]
            if "name" in srv:
                self.server_name = srv["name"]
            if "version" in srv:
                self.server_version = srv["version"]

    def _load_env(self) -> None:
        """Apply non-empty environment variables on top of current values."""
        if client_id := os.environ.get("CLIENT_ID"):
            self.google.client_id = client_id
        if client_secret := os.environ.get("CLIENT_SECRET"):
            self.google.client_secret = client_secret
        if redirect_uri := os.environ.get("REDIRECT_URI"):
            self.google.redirect_uri = redirect_uri
        if access_token := os.environ.get("ACCESS_TOKEN"):
            self.google.access_token = access_token
        if refresh_token := os.environ.get("REFRESH_TOKEN"):
            self.google.refresh_token = refresh_token
        if token_uri := os.environ.get("GOOGLE_TASKS_MCP_TOKEN_URI"):
            self.google.token_uri = token_uri

        if level := os.environ.get("GOOGLE_TASKS_MCP_LOG_LEVEL"):
            self.log_level = level.upper()
        if log_format := os.environ.get("GOOGLE_TASKS_MCP_LOG_FORMAT"):
            self.log_format = _normalize_log_format(log_format)

        if server_name := os.environ.get("GOOGLE_TASKS_MCP_SERVER_NAME"):
            self.server_name = server_name

    def require_credentials(self) -> GoogleCredentials:
        """
        Return the Google credentials, failing once if any are missing.

        Raises:
            ConfigurationError: Naming every required field that is absent.
        """
        missing = self.google.missing_fields()
        if missing:
            raise ConfigurationError(
                "Missing required configuration: " + ", ".join(missing),
                missing=missing,
            )
        return self.google

    def setup_logging(self) -> None:
        """Install the stderr log handler at the configured level and format."""
        from google_tasks_mcp.core.logging_config import configure_logging

        level = getattr(logging, self.log_level, logging.INFO)
        configure_logging(level=level, format=self.log_format)


_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Process-wide configuration, resolved from the environment on first use."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: Optional[ServerConfig]) -> None:
    """Replace the process-wide configuration; ``None`` forces re-resolution."""
    global _config
    _config = config
