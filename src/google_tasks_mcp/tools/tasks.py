"""Google Tasks tool surface.

Each tool forwards its raw arguments to ``TaskRouter`` on a worker thread,
so one slow Google call does not block other invocations on the event loop.
"""

import asyncio
import logging
from typing import Annotated, Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from google_tasks_mcp.config import ServerConfig
from google_tasks_mcp.core.naming import canonical_tool
from google_tasks_mcp.core.requests import (
    COMPLETE_TASK,
    CREATE_TASK,
    DELETE_TASK,
    LIST_TASKS,
)
from google_tasks_mcp.core.validation import (
    MAX_NOTES_LENGTH,
    MAX_TASK_ID_LENGTH,
    MAX_TITLE_LENGTH,
    VALID_TASK_STATUSES,
)
from google_tasks_mcp.tools.router import ACTION_SUMMARIES, TaskRouter

logger = logging.getLogger(__name__)

# Advertised in the schema only; the router rejects other values with an envelope.
_STATUS_SCHEMA = {"enum": list(VALID_TASK_STATUSES)}


def _compact(**arguments: Any) -> Dict[str, Any]:
    return {key: value for key, value in arguments.items() if value is not None}


def register_task_tools(mcp: FastMCP, config: ServerConfig, router: TaskRouter) -> None:
    """Register create/list/delete/complete task tools."""

    async def _dispatch(name: str, arguments: Dict[str, Any]) -> dict:
        return await asyncio.to_thread(router.dispatch, name, arguments)

    @canonical_tool(
        mcp,
        canonical_name=CREATE_TASK,
        description=ACTION_SUMMARIES[CREATE_TASK],
    )
    async def create_task(
        title: Annotated[
            str,
            Field(
                description="Title of the task",
                json_schema_extra={"maxLength": MAX_TITLE_LENGTH},
            ),
        ],
        notes: Annotated[
            Optional[str],
            Field(
                description="Notes for the task",
                json_schema_extra={"maxLength": MAX_NOTES_LENGTH},
            ),
        ] = None,
        status: Annotated[
            Optional[str],
            Field(
                description="Status of task, needsAction or completed",
                json_schema_extra=_STATUS_SCHEMA,
            ),
        ] = None,
    ):
        return await _dispatch(
            CREATE_TASK, _compact(title=title, notes=notes, status=status)
        )

    @canonical_tool(
        mcp,
        canonical_name=LIST_TASKS,
        description=ACTION_SUMMARIES[LIST_TASKS],
    )
    async def list_tasks():
        return await _dispatch(LIST_TASKS, {})

    @canonical_tool(
        mcp,
        canonical_name=DELETE_TASK,
        description=ACTION_SUMMARIES[DELETE_TASK],
    )
    async def delete_task(
        taskId: Annotated[
            str,
            Field(
                description="ID of the task to delete",
                json_schema_extra={"maxLength": MAX_TASK_ID_LENGTH},
            ),
        ],
    ):
        return await _dispatch(DELETE_TASK, {"taskId": taskId})

    @canonical_tool(
        mcp,
        canonical_name=COMPLETE_TASK,
        description=ACTION_SUMMARIES[COMPLETE_TASK],
    )
    async def complete_task(
        taskId: Annotated[
            str,
            Field(
                description="ID of the task to toggle completion status",
                json_schema_extra={"maxLength": MAX_TASK_ID_LENGTH},
            ),
        ],
        status: Annotated[
            Optional[str],
            Field(
                description="Status of task, needsAction or completed",
                json_schema_extra=_STATUS_SCHEMA,
            ),
        ] = None,
    ):
        return await _dispatch(COMPLETE_TASK, _compact(taskId=taskId, status=status))

    logger.debug(
        "Registered task tools for %s: %s",
        config.server_name,
        ", ".join(router.allowed_actions),
    )


__all__ = ["register_task_tools"]
