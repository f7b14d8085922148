"""MCP tool registration surface."""

from typing import TYPE_CHECKING

from google_tasks_mcp.tools.router import TaskRouter
from google_tasks_mcp.tools.tasks import register_task_tools

if TYPE_CHECKING:  # pragma: no cover - import-time typing only
    from mcp.server.fastmcp import FastMCP
    from google_tasks_mcp.config import ServerConfig


def register_tools(mcp: "FastMCP", config: "ServerConfig", router: TaskRouter) -> None:
    """Register every task tool on ``mcp``."""
    register_task_tools(mcp, config, router)


__all__ = [
    "TaskRouter",
    "register_tools",
    "register_task_tools",
]
