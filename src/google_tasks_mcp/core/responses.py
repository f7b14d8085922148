"""
Response envelopes returned by every task tool.

Envelope shape (``response-v2``)::

    {
        "success": true,
        "data": {"task": {...}},
        "error": null,
        "meta": {"version": "response-v2", "request_id": "tool_1a2b3c4d5e6f"}
    }

On failure ``success`` is false, ``error`` holds the caller-facing message
and ``data`` carries ``error_code``, ``error_type``, ``remediation`` and,
when there is something to point at, ``details``::

    {
        "success": false,
        "data": {
            "error_code": "VALIDATION_ERROR",
            "error_type": "validation",
            "remediation": "Provide a non-empty 'taskId' value",
            "details": {"field": "taskId", "action": "delete_task"}
        },
        "error": "Invalid field 'taskId' for delete_task: must be a non-empty string",
        "meta": {"version": "response-v2"}
    }

An internal error never carries the text of the exception that caused it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from google_tasks_mcp.core.context import get_correlation_id

RESPONSE_VERSION = "response-v2"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    METHOD_NOT_FOUND = "METHOD_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorType(str, Enum):
    """Error category; tells a caller whether retrying can help."""

    VALIDATION = "validation"  # fix the input
    NOT_FOUND = "not_found"  # pick another tool
    INTERNAL = "internal"  # may succeed on retry


@dataclass
class ToolResponse:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": RESPONSE_VERSION})


def _value(item: Union[Enum, str]) -> str:
    return item.value if isinstance(item, Enum) else item


def _build_meta(
    *,
    request_id: Optional[str] = None,
    warnings: Optional[Sequence[str]] = None,
    telemetry: Optional[Mapping[str, Any]] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Metadata block; ``request_id`` defaults to the active correlation ID."""
    meta: Dict[str, Any] = {"version": RESPONSE_VERSION}
    request_id = request_id or get_correlation_id()
    if request_id:
        meta["request_id"] = request_id
    if warnings:
        meta["warnings"] = list(warnings)
    if telemetry:
        meta["telemetry"] = dict(telemetry)
    if extra:
        meta.update(extra)
    return meta


def success_response(
    data: Optional[Mapping[str, Any]] = None,
    *,
    warnings: Optional[Sequence[str]] = None,
    telemetry: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
    **fields: Any,
) -> ToolResponse:
    """Build a success envelope.

    ``data`` and keyword ``fields`` are merged into the payload, so
    ``success_response(task=task)`` and ``success_response({"task": task})``
    are equivalent.
    """
    payload = dict(data or {})
    payload.update(fields)
    return ToolResponse(
        success=True,
        data=payload,
        meta=_build_meta(
            request_id=request_id, warnings=warnings, telemetry=telemetry, extra=meta
        ),
    )


def error_response(
    message: str,
    *,
    data: Optional[Mapping[str, Any]] = None,
    error_code: Union[ErrorCode, str] = ErrorCode.INTERNAL_ERROR,
    error_type: Union[ErrorType, str] = ErrorType.INTERNAL,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
    telemetry: Optional[Mapping[str, Any]] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> ToolResponse:
    """Build an error envelope.

    Keys already present in ``data`` win over the keyword arguments.

    Example:
        >>> error_response(
        ...     "Invalid task status. Must be 'needsAction' or 'completed'.",
        ...     error_code=ErrorCode.VALIDATION_ERROR,
        ...     error_type=ErrorType.VALIDATION,
        ...     details={"field": "status"},
        ... )
    """
    payload = dict(data or {})
    payload.setdefault("error_code", _value(error_code))
    payload.setdefault("error_type", _value(error_type))
    if remediation is not None:
        payload.setdefault("remediation", remediation)
    if details:
        payload.setdefault("details", dict(details))
    return ToolResponse(
        success=False,
        data=payload,
        error=message,
        meta=_build_meta(request_id=request_id, telemetry=telemetry, extra=meta),
    )


def validation_error(
    message: str,
    *,
    field: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    remediation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Invalid-arguments envelope; ``field`` is folded into ``details``."""
    merged = dict(details or {})
    if field:
        merged.setdefault("field", field)
    return error_response(
        message,
        error_code=ErrorCode.VALIDATION_ERROR,
        error_type=ErrorType.VALIDATION,
        remediation=remediation,
        details=merged,
        request_id=request_id,
    )


def method_not_found_error(
    name: str,
    allowed: Sequence[str],
    *,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Envelope for an operation name no handler is registered under."""
    allowed = list(allowed)
    return error_response(
        f"Unknown tool: {name}",
        error_code=ErrorCode.METHOD_NOT_FOUND,
        error_type=ErrorType.NOT_FOUND,
        remediation=f"Use one of: {', '.join(allowed)}",
        details={"tool": name, "allowed_tools": allowed},
        request_id=request_id,
    )


def internal_error(
    message: str = "An internal error occurred",
    *,
    request_id: Optional[str] = None,
) -> ToolResponse:
    """Internal-failure envelope.

    ``message`` must already be safe to show; the remediation quotes the
    request ID so the logged cause can be found.
    """
    request_id = request_id or get_correlation_id()
    remediation = "Please try again. If the problem persists, contact support."
    if request_id:
        remediation += f" Reference: {request_id}"
    return error_response(
        message,
        error_code=ErrorCode.INTERNAL_ERROR,
        error_type=ErrorType.INTERNAL,
        remediation=remediation,
        request_id=request_id,
    )
