"""FastMCP server for google-tasks-mcp.

Exposes create_task, list_tasks, delete_task and complete_task over stdio,
plus the ``tasks://default`` resource.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import asdict
from typing import Optional

from mcp.server.fastmcp import FastMCP

from google_tasks_mcp.config import ServerConfig, get_config
from google_tasks_mcp.core.client import TasksClient
from google_tasks_mcp.core.errors import ConfigurationError
from google_tasks_mcp.core.observability import audit_log, redact_for_logging
from google_tasks_mcp.resources import register_task_resources
from google_tasks_mcp.tools import TaskRouter, register_tools

logger = logging.getLogger(__name__)


def create_server(
    config: Optional[ServerConfig] = None,
    client: Optional[TasksClient] = None,
) -> FastMCP:
    """Create and configure the FastMCP server instance.

    Without an explicit ``client`` the Google credentials are required and a
    Tasks API service is built from them.

    Raises:
        ConfigurationError: A required credential is missing.
    """

    if config is None:
        config = get_config()

    config.setup_logging()

    if client is None:
        credentials = config.require_credentials()
        logger.debug("Google configuration: %s", redact_for_logging(asdict(credentials)))
        client = TasksClient.from_credentials(credentials)

    mcp = FastMCP(name=config.server_name)

    router = TaskRouter(client)
    register_tools(mcp, config, router)
    register_task_resources(mcp, config, client)

    logger.info("Server created: %s v%s", config.server_name, config.server_version)
    return mcp


def main() -> None:
    """Main entry point for the google-tasks-mcp server."""

    try:
        config = get_config()
        server = create_server(config)

        logger.info("Starting %s v%s", config.server_name, config.server_version)
        audit_log("server_lifecycle", event="server_start", version=config.server_version)

        server.run()

    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        audit_log("server_lifecycle", event="server_error", error=str(exc), success=False)
        sys.exit(1)
    except Exception as exc:
        logger.error("Server error: %s: %s", type(exc).__name__, exc, exc_info=True)
        audit_log(
            "server_lifecycle",
            event="server_error",
            error=type(exc).__name__,
            success=False,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
