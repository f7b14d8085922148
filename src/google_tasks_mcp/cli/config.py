"""CLI execution context.

Builds the router on first use so commands that never talk to Google (such
as ``tools``) run without credentials.
"""

from typing import Optional

from google_tasks_mcp.config import ServerConfig, get_config as get_server_config
from google_tasks_mcp.core.client import TasksClient
from google_tasks_mcp.tools.router import TaskRouter


class CLIContext:
    """Holds the effective configuration and, lazily, the task router."""

    def __init__(
        self,
        server_config: Optional[ServerConfig] = None,
        client: Optional[TasksClient] = None,
    ):
        """Initialize CLI context.

        Args:
            server_config: Optional server config (uses global if not provided).
            client: Pre-built adapter; built from credentials when omitted.
        """
        self._config = server_config or get_server_config()
        self._client = client
        self._router: Optional[TaskRouter] = None

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def router(self) -> TaskRouter:
        """Router over the configured client.

        Raises:
            ConfigurationError: Credentials are needed and some are missing.
        """
        if self._router is None:
            if self._client is None:
                credentials = self._config.require_credentials()
                self._client = TasksClient.from_credentials(credentials)
            self._router = TaskRouter(self._client)
        return self._router


def create_context(
    server_config: Optional[ServerConfig] = None,
    client: Optional[TasksClient] = None,
) -> CLIContext:
    return CLIContext(server_config=server_config, client=client)
