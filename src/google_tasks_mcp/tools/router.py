"""Request router: validate a tool invocation, then run its handler.

The router owns the mapping from operation name to handler. Dispatch always
returns a serialized ``response-v2`` envelope; expected failures never
escape as exceptions.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from google_tasks_mcp.core.client import TasksClient
from google_tasks_mcp.core.errors import (
    GENERIC_ERROR_MESSAGE,
    InvalidArgumentsError,
    MethodNotFoundError,
    RemoteServiceError,
)
from google_tasks_mcp.core.observability import get_metrics
from google_tasks_mcp.core.requests import (
    COMPLETE_TASK,
    CREATE_TASK,
    DELETE_TASK,
    LIST_TASKS,
    CompleteTaskRequest,
    CreateTaskRequest,
    DeleteTaskRequest,
    ListTasksRequest,
    parse_request,
)
from google_tasks_mcp.core.responses import (
    ToolResponse,
    internal_error,
    method_not_found_error,
    success_response,
    validation_error,
)

logger = logging.getLogger(__name__)
_metrics = get_metrics()

DELETE_CONFIRMATION = "Task deleted successfully."

ACTION_SUMMARIES: Dict[str, str] = {
    CREATE_TASK: "Create a new task in Google Tasks",
    LIST_TASKS: "List all tasks in the default task list",
    DELETE_TASK: "Delete a task from the default task list",
    COMPLETE_TASK: "Toggle the completion status of a task",
}


@dataclass(frozen=True)
class ActionDefinition:
    """A named operation and the handler that serves its typed request."""

    name: str
    handler: Callable[[Any], ToolResponse]
    summary: str = ""


class TaskRouter:
    """Dispatch tool invocations onto a ``TasksClient``."""

    def __init__(self, client: TasksClient) -> None:
        self._client = client
        self._actions: Dict[str, ActionDefinition] = {}
        for definition in self._build_definitions():
            self._actions[definition.name] = definition

    def _build_definitions(self) -> Iterable[ActionDefinition]:
        return (
            ActionDefinition(
                name=CREATE_TASK,
                handler=self._handle_create,
                summary=ACTION_SUMMARIES[CREATE_TASK],
            ),
            ActionDefinition(
                name=LIST_TASKS,
                handler=self._handle_list,
                summary=ACTION_SUMMARIES[LIST_TASKS],
            ),
            ActionDefinition(
                name=DELETE_TASK,
                handler=self._handle_delete,
                summary=ACTION_SUMMARIES[DELETE_TASK],
            ),
            ActionDefinition(
                name=COMPLETE_TASK,
                handler=self._handle_complete,
                summary=ACTION_SUMMARIES[COMPLETE_TASK],
            ),
        )

    @property
    def allowed_actions(self) -> Tuple[str, ...]:
        return tuple(self._actions)

    def describe(self) -> Dict[str, str]:
        """Operation name to one-line summary."""
        return {name: action.summary for name, action in self._actions.items()}

    def dispatch(self, name: str, arguments: Optional[Any] = None) -> dict:
        """Run one tool invocation and return its serialized envelope."""
        start = time.perf_counter()
        response = self._dispatch(name, arguments)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if response.success:
            response.meta["telemetry"] = {"duration_ms": round(elapsed_ms, 2)}
        status = "success" if response.success else response.data.get("error_code", "error")
        _metrics.counter(f"router.{name}", labels={"status": str(status).lower()})
        return asdict(response)

    def _dispatch(self, name: str, arguments: Optional[Any]) -> ToolResponse:
        definition = self._actions.get(name) if isinstance(name, str) else None
        if definition is None:
            logger.info("Rejected unknown tool %r", name)
            return method_not_found_error(str(name), self.allowed_actions)

        try:
            request = parse_request(name, arguments)
            return definition.handler(request)
        except InvalidArgumentsError as exc:
            logger.info("Invalid arguments for %s: %s", name, exc.message)
            return validation_error(
                exc.message,
                details=exc.details or {"action": name},
                remediation=exc.remediation,
            )
        except MethodNotFoundError as exc:
            return method_not_found_error(exc.name, exc.allowed)
        except RemoteServiceError as exc:
            # Cause already logged by the client.
            return internal_error(exc.message)
        except Exception:
            logger.exception("Unexpected failure while handling %s", name)
            return internal_error(GENERIC_ERROR_MESSAGE)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _handle_list(self, request: ListTasksRequest) -> ToolResponse:
        tasks = self._client.list_tasks()
        return success_response(tasks=tasks, count=len(tasks))

    def _handle_create(self, request: CreateTaskRequest) -> ToolResponse:
        task = self._client.create_task(
            request.title, notes=request.notes, status=request.status
        )
        logger.info("Created task %s", (task or {}).get("id", "<unknown>"))
        return success_response(task=task)

    def _handle_delete(self, request: DeleteTaskRequest) -> ToolResponse:
        self._client.delete_task(request.task_id)
        logger.info("Deleted task %s", request.task_id)
        return success_response(message=DELETE_CONFIRMATION, task_id=request.task_id)

    def _handle_complete(self, request: CompleteTaskRequest) -> ToolResponse:
        task = self._client.set_status(request.task_id, request.status)
        logger.info("Set task %s status to %s", request.task_id, request.status)
        return success_response(task=task)


__all__ = [
    "ACTION_SUMMARIES",
    "ActionDefinition",
    "DELETE_CONFIRMATION",
    "TaskRouter",
]
