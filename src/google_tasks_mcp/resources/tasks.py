"""
Task list resources for google-tasks-mcp.

Exposes the default task list as a read-only MCP resource.
"""

import asyncio
import json
import logging

from mcp.server.fastmcp import FastMCP

from google_tasks_mcp.config import ServerConfig
from google_tasks_mcp.core.client import TasksClient
from google_tasks_mcp.core.context import generate_correlation_id, sync_request_context
from google_tasks_mcp.core.observability import get_audit_logger

logger = logging.getLogger(__name__)

DEFAULT_TASKS_RESOURCE_URI = "tasks://default"


def register_task_resources(mcp: FastMCP, config: ServerConfig, client: TasksClient) -> None:
    """
    Register task list resources with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        config: Server configuration
        client: Adapter for the default task list
    """

    @mcp.resource(
        DEFAULT_TASKS_RESOURCE_URI,
        name="Default Task List",
        description="Manage your Google Tasks",
        mime_type="application/json",
    )
    async def resource_default_tasks() -> str:
        """Tasks of the default list as an indented JSON array.

        A remote failure propagates as ``RemoteServiceError``, whose message
        is generic.
        """
        with sync_request_context(correlation_id=generate_correlation_id(prefix="res")):
            get_audit_logger().resource_access(
                "task_list", client.tasklist, server=config.server_name
            )
            tasks = await asyncio.to_thread(client.list_tasks)
            logger.debug("Read %d tasks from %s", len(tasks), DEFAULT_TASKS_RESOURCE_URI)
            return json.dumps(tasks, indent=2)


__all__ = ["DEFAULT_TASKS_RESOURCE_URI", "register_task_resources"]
