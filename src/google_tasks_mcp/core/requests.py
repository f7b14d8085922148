"""Typed task requests built from raw tool arguments.

``parse_request`` is the only way to obtain a request object. Each request
type holds already-validated, already-sanitized fields, so the handlers that
consume them do no shape checking of their own.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from google_tasks_mcp.core.errors import InvalidArgumentsError, MethodNotFoundError
from google_tasks_mcp.core.validation import (
    MAX_NOTES_LENGTH,
    MAX_TASK_ID_LENGTH,
    MAX_TITLE_LENGTH,
    STATUS_COMPLETED,
    optional_text,
    require_text,
    validate_status,
)

logger = logging.getLogger(__name__)

CREATE_TASK = "create_task"
LIST_TASKS = "list_tasks"
DELETE_TASK = "delete_task"
COMPLETE_TASK = "complete_task"


@dataclass(frozen=True)
class ListTasksRequest:
    """List every task in the default list."""


@dataclass(frozen=True)
class CreateTaskRequest:
    title: str
    notes: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class DeleteTaskRequest:
    task_id: str


@dataclass(frozen=True)
class CompleteTaskRequest:
    """Set a task's status; ``completed`` unless ``needsAction`` was asked for."""

    task_id: str
    status: str = STATUS_COMPLETED


TaskRequest = Union[
    ListTasksRequest, CreateTaskRequest, DeleteTaskRequest, CompleteTaskRequest
]


def _parse_list(arguments: Dict[str, Any]) -> ListTasksRequest:
    if arguments:
        logger.debug("Ignoring arguments for %s: %s", LIST_TASKS, sorted(arguments))
    return ListTasksRequest()


def _parse_create(arguments: Dict[str, Any]) -> CreateTaskRequest:
    title = require_text(
        arguments,
        "title",
        action=CREATE_TASK,
        max_length=MAX_TITLE_LENGTH,
        label="Task title",
    )
    notes = optional_text(
        arguments, "notes", action=CREATE_TASK, max_length=MAX_NOTES_LENGTH
    )
    status = arguments.get("status")
    if status is not None:
        status = validate_status(status, action=CREATE_TASK)
    return CreateTaskRequest(title=title, notes=notes, status=status)


def _parse_delete(arguments: Dict[str, Any]) -> DeleteTaskRequest:
    task_id = require_text(
        arguments,
        "taskId",
        action=DELETE_TASK,
        max_length=MAX_TASK_ID_LENGTH,
        label="Task ID",
    )
    return DeleteTaskRequest(task_id=task_id)


def _parse_complete(arguments: Dict[str, Any]) -> CompleteTaskRequest:
    task_id = require_text(
        arguments,
        "taskId",
        action=COMPLETE_TASK,
        max_length=MAX_TASK_ID_LENGTH,
        label="Task ID",
    )
    requested = arguments.get("status")
    status = validate_status(
        STATUS_COMPLETED if requested is None else requested, action=COMPLETE_TASK
    )
    return CompleteTaskRequest(task_id=task_id, status=status)


_PARSERS: Dict[str, Callable[[Dict[str, Any]], TaskRequest]] = {
    CREATE_TASK: _parse_create,
    LIST_TASKS: _parse_list,
    DELETE_TASK: _parse_delete,
    COMPLETE_TASK: _parse_complete,
}

OPERATION_NAMES: Tuple[str, ...] = tuple(_PARSERS)


def parse_request(name: str, arguments: Any = None) -> TaskRequest:
    """Validate a raw tool invocation and build its typed request.

    The operation name is checked before the arguments are looked at.

    Args:
        name: Tool name as sent by the caller
        arguments: Argument bag; None is treated as empty

    Raises:
        MethodNotFoundError: Unknown operation name
        InvalidArgumentsError: Arguments failed validation
    """
    parser = _PARSERS.get(name) if isinstance(name, str) else None
    if parser is None:
        raise MethodNotFoundError(str(name), OPERATION_NAMES)

    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArgumentsError(
            f"Invalid arguments for {name}: expected an object",
            action=name,
            remediation="Pass arguments as a JSON object",
        )
    return parser(dict(arguments))


__all__ = [
    "CREATE_TASK",
    "LIST_TASKS",
    "DELETE_TASK",
    "COMPLETE_TASK",
    "OPERATION_NAMES",
    "ListTasksRequest",
    "CreateTaskRequest",
    "DeleteTaskRequest",
    "CompleteTaskRequest",
    "TaskRequest",
    "parse_request",
]
