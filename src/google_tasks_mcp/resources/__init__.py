"""
MCP resources for google-tasks-mcp.

Provides read access to the default task list.
"""

from google_tasks_mcp.resources.tasks import register_task_resources

__all__ = ["register_task_resources"]
