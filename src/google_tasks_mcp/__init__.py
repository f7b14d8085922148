"""Google Tasks MCP - MCP server for the default Google Tasks list."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("google-tasks-mcp")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "0.1.0"

from google_tasks_mcp.server import create_server, main

__all__ = ["__version__", "create_server", "main"]
