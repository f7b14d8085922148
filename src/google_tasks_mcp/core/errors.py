"""Exception hierarchy for tool dispatch and startup.

Each ``TaskToolError`` subclass carries the canonical ``ErrorCode``/``ErrorType``
pair used when it is rendered as a response envelope. ``ConfigurationError``
is never rendered to a caller; it aborts startup.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from google_tasks_mcp.core.responses import ErrorCode, ErrorType

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"


class TaskToolError(Exception):
    """Base class for errors surfaced to tool callers."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    error_type: ErrorType = ErrorType.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        remediation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.remediation = remediation
        self.details = details or {}


class InvalidArgumentsError(TaskToolError):
    """Caller-supplied arguments failed a schema, length, emptiness or enum check."""

    error_code = ErrorCode.VALIDATION_ERROR
    error_type = ErrorType.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        action: Optional[str] = None,
        remediation: Optional[str] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if action:
            details["action"] = action
        super().__init__(message, remediation=remediation, details=details)
        self.field = field
        self.action = action


class MethodNotFoundError(TaskToolError):
    """The requested operation name is not registered."""

    error_code = ErrorCode.METHOD_NOT_FOUND
    error_type = ErrorType.NOT_FOUND

    def __init__(self, name: str, allowed: Sequence[str]) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name
        self.allowed = list(allowed)


class RemoteServiceError(TaskToolError):
    """A remote call failed.

    The message is always generic. The underlying exception is kept as
    ``__cause__`` for logs and is never rendered to the caller.
    """

    error_code = ErrorCode.INTERNAL_ERROR
    error_type = ErrorType.INTERNAL

    def __init__(self, operation: str) -> None:
        super().__init__(GENERIC_ERROR_MESSAGE)
        self.operation = operation


class ConfigurationError(Exception):
    """Required startup configuration is missing or invalid."""

    def __init__(self, message: str, *, missing: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "TaskToolError",
    "InvalidArgumentsError",
    "MethodNotFoundError",
    "RemoteServiceError",
    "ConfigurationError",
]
