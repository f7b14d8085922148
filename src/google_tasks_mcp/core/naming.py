"""Tool registration with instrumentation and compact JSON output."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent

from google_tasks_mcp.core.observability import mcp_tool

logger = logging.getLogger(__name__)


def _as_text(result: Any) -> Any:
    # Envelope dicts go out as one line of JSON; anything else is left to FastMCP.
    if not isinstance(result, dict):
        return result
    return TextContent(type="text", text=json.dumps(result, separators=(",", ":"), default=str))


def canonical_tool(
    mcp: FastMCP,
    *,
    canonical_name: str,
    **tool_kwargs: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register the decorated function as the MCP tool ``canonical_name``.

    ``mcp_tool`` sees the envelope dict before it is turned into text, so the
    audit record knows whether the call failed. Extra keyword arguments such
    as ``description`` go to ``FastMCP.tool``.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        instrumented = mcp_tool(tool_name=canonical_name)(func)

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def handler(*args: Any, **kwargs: Any) -> Any:
                return _as_text(await instrumented(*args, **kwargs))

        else:

            @functools.wraps(func)
            def handler(*args: Any, **kwargs: Any) -> Any:
                return _as_text(instrumented(*args, **kwargs))

        logger.debug("Registering tool %s", canonical_name)
        return mcp.tool(name=canonical_name, **tool_kwargs)(handler)

    return decorator
