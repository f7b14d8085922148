"""CLI module entry point.

Enables running the CLI via: python -m google_tasks_mcp.cli
"""

from google_tasks_mcp.cli.main import cli

if __name__ == "__main__":
    cli()
