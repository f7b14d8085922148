"""Google Tasks CLI - drive the task tools from a shell.

All commands emit JSON envelopes to stdout.
"""

from google_tasks_mcp.cli.config import CLIContext, create_context
from google_tasks_mcp.cli.main import cli
from google_tasks_mcp.cli.output import emit, emit_error

__all__ = [
    "cli",
    "CLIContext",
    "create_context",
    "emit",
    "emit_error",
]
