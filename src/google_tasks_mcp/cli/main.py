"""google-tasks CLI entry point.

Drives the same router as the MCP server and prints JSON envelopes.
"""

import json
from dataclasses import asdict
from typing import Optional

import click

from google_tasks_mcp.cli.config import CLIContext, create_context
from google_tasks_mcp.cli.output import emit, emit_error
from google_tasks_mcp.core.context import generate_correlation_id, sync_request_context
from google_tasks_mcp.core.errors import ConfigurationError
from google_tasks_mcp.core.responses import success_response, validation_error
from google_tasks_mcp.tools.router import ACTION_SUMMARIES


def _get_context(ctx: click.Context) -> CLIContext:
    return ctx.obj["cli_context"]


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """Google Tasks CLI - call the task tools from a shell.

    All commands output JSON envelopes.
    """
    ctx.ensure_object(dict)
    cli_context = create_context(
        server_config=ctx.obj.get("config"),
        client=ctx.obj.get("client"),
    )
    if log_level:
        cli_context.config.log_level = log_level.upper()
    cli_context.config.setup_logging()
    ctx.obj["cli_context"] = cli_context


@cli.command("tools")
def list_tools() -> None:
    """List the available task tools."""
    response = success_response(
        tools=[
            {"name": name, "description": summary}
            for name, summary in ACTION_SUMMARIES.items()
        ],
        count=len(ACTION_SUMMARIES),
    )
    emit(asdict(response))


@cli.command("call")
@click.argument("name")
@click.option(
    "--args",
    "raw_args",
    default=None,
    metavar="JSON",
    help='Tool arguments as a JSON object, e.g. \'{"title": "Buy milk"}\'',
)
@click.pass_context
def call_tool(ctx: click.Context, name: str, raw_args: Optional[str]) -> None:
    """Invoke task tool NAME and print its response envelope."""
    with sync_request_context(correlation_id=generate_correlation_id(prefix="cli")):
        try:
            arguments = json.loads(raw_args) if raw_args else {}
        except json.JSONDecodeError as exc:
            emit(
                asdict(
                    validation_error(
                        f"Invalid JSON for --args: {exc.msg}",
                        field="args",
                        remediation="Pass arguments as a JSON object",
                    )
                )
            )
            ctx.exit(1)

        try:
            router = _get_context(ctx).router
        except ConfigurationError as exc:
            emit_error(
                str(exc),
                details={"missing": exc.missing},
                remediation="Set the missing variables in the environment or a .env file",
            )

        result = router.dispatch(name, arguments)
        emit(result)
        if not result["success"]:
            ctx.exit(1)


if __name__ == "__main__":
    cli()
