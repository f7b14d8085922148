"""
Secret redaction, metrics and audit records for google-tasks-mcp.

Metrics and audit events are plain log records on two child loggers,
``...observability.metrics`` and ``...observability.audit``, carrying their
payload under ``extra``. They therefore share the stderr handler set up by
``configure_logging`` and can be filtered by logger name.

Tool handlers are wrapped with ``mcp_tool``, which binds a ``tool_`` correlation
ID for the call and records how the call ended:

    @mcp_tool(tool_name="list_tasks")
    async def list_tasks():
        ...
"""

import asyncio
import functools
import json
import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Final, List, Optional, Pattern, Tuple, TypeVar

from google_tasks_mcp.core.context import (
    generate_correlation_id,
    get_correlation_id,
    sync_request_context,
)

logger = logging.getLogger(__name__)

_TOKEN = r"['\"]?([A-Za-z0-9_\-\./]{%d,})['\"]?"

SENSITIVE_PATTERNS: Final[List[Tuple[Pattern[str], str]]] = [
    (re.compile(r"ya29\.[A-Za-z0-9_\-\.]+"), "GOOGLE_ACCESS_TOKEN"),
    (re.compile(r"1//[A-Za-z0-9_\-]{20,}"), "GOOGLE_REFRESH_TOKEN"),
    (re.compile(r"GOCSPX-[A-Za-z0-9_\-]+"), "GOOGLE_CLIENT_SECRET"),
    (re.compile(r"(?i)bearer\s+[A-Za-z0-9_\-\.]+"), "BEARER_TOKEN"),
    (re.compile(r"(?i)access[_-]?token\s*[:=]\s*" + _TOKEN % 20), "ACCESS_TOKEN"),
    (re.compile(r"(?i)refresh[_-]?token\s*[:=]\s*" + _TOKEN % 20), "REFRESH_TOKEN"),
    (re.compile(r"(?i)client[_-]?secret\s*[:=]\s*" + _TOKEN % 10), "CLIENT_SECRET"),
    (re.compile(r"(?i)[?&]key=[A-Za-z0-9_\-]{20,}"), "API_KEY"),
]
"""Secret shapes that may show up in Google client error text, with labels."""

# Mapping keys whose values are replaced wholesale.
_SECRET_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "client_secret",
        "token",
        "secret",
        "password",
        "authorization",
        "credentials",
        "api_key",
    }
)


def redact_sensitive_data(data: Any, *, _depth: int = 10) -> Any:
    """Return a copy of ``data`` with OAuth material masked.

    Strings are scanned with ``SENSITIVE_PATTERNS``; values under secret-looking
    mapping keys become ``[REDACTED:<KEY>]``. Lists, tuples and dicts are
    walked up to ten levels deep.

    >>> redact_sensitive_data({"refresh_token": "1//abc", "title": "x"})
    {'refresh_token': '[REDACTED:REFRESH_TOKEN]', 'title': 'x'}
    """
    if _depth <= 0:
        return "[MAX_DEPTH_EXCEEDED]"
    if isinstance(data, str):
        for pattern, label in SENSITIVE_PATTERNS:
            data = pattern.sub(f"[REDACTED:{label}]", data)
        return data
    if isinstance(data, dict):
        out = {}
        for key, value in data.items():
            normalized = str(key).lower().replace("-", "_")
            if normalized in _SECRET_KEYS:
                out[key] = f"[REDACTED:{normalized.upper()}]"
            else:
                out[key] = redact_sensitive_data(value, _depth=_depth - 1)
        return out
    if isinstance(data, (list, tuple)):
        items = [redact_sensitive_data(item, _depth=_depth - 1) for item in data]
        return tuple(items) if isinstance(data, tuple) else items
    return data


def redact_for_logging(data: Any) -> str:
    """Redact ``data`` and render it as a single JSON string."""
    return json.dumps(redact_sensitive_data(data), default=str)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MetricsCollector:
    """Writes counters and timers to the ``metrics`` child logger."""

    def __init__(self, prefix: str = "google_tasks_mcp"):
        self.prefix = prefix
        self._logger = logging.getLogger(f"{__name__}.metrics")

    def _emit(self, kind: str, name: str, value: float, labels: Optional[Dict[str, str]]) -> None:
        payload = {
            "name": name,
            "value": value,
            "type": kind,
            "labels": dict(labels or {}),
            "timestamp": _utc_now(),
        }
        self._logger.info("METRIC: %s.%s", self.prefix, name, extra={"metric": payload})

    def counter(self, name: str, value: int = 1, labels: Optional[Dict[str, str]] = None) -> None:
        self._emit("counter", name, value, labels)

    def timer(self, name: str, duration_ms: float, labels: Optional[Dict[str, str]] = None) -> None:
        self._emit("timer", name, round(duration_ms, 2), labels)


_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    return _metrics


class AuditEventType(Enum):
    RESOURCE_ACCESS = "resource_access"
    TOOL_INVOCATION = "tool_invocation"
    REMOTE_FAILURE = "remote_failure"
    SERVER_LIFECYCLE = "server_lifecycle"


@dataclass
class AuditEvent:
    """One audit record. The correlation ID defaults to the active one."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = None
    timestamp: str = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        self.correlation_id = self.correlation_id or get_correlation_id() or None

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }
        if self.correlation_id:
            record["correlation_id"] = self.correlation_id
        return record


class AuditLogger:
    """
    Writes audit events to the ``audit`` child logger.

    This and the application log are the only places the real cause of a
    remote failure is recorded; tool responses carry a generic message.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.audit")

    def log(self, event: AuditEvent) -> None:
        self._logger.info("AUDIT: %s", event.event_type.value, extra={"audit": event.to_dict()})

    def resource_access(
        self, resource_type: str, resource_id: str, action: str = "read", **details: Any
    ) -> None:
        details.update(resource_type=resource_type, resource_id=resource_id, action=action)
        self.log(AuditEvent(AuditEventType.RESOURCE_ACCESS, details))

    def tool_invocation(
        self,
        tool_name: str,
        success: bool = True,
        duration_ms: Optional[float] = None,
        correlation_id: Optional[str] = None,
        **details: Any,
    ) -> None:
        details.update(tool=tool_name, success=success, duration_ms=duration_ms)
        self.log(AuditEvent(AuditEventType.TOOL_INVOCATION, details, correlation_id))

    def remote_failure(self, operation: str, error: BaseException) -> None:
        self.log(
            AuditEvent(
                AuditEventType.REMOTE_FAILURE,
                {
                    "operation": operation,
                    "error_type": type(error).__name__,
                    "error": redact_sensitive_data(str(error)),
                },
            )
        )


_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    return _audit


def audit_log(event_type: str, **details: Any) -> None:
    """Record an audit event by type name.

    Names outside ``AuditEventType`` are filed as ``tool_invocation`` with the
    given name kept in ``original_event_type``.
    """
    try:
        kind = AuditEventType(event_type)
    except ValueError:
        kind = AuditEventType.TOOL_INVOCATION
        details["original_event_type"] = event_type
    _audit.log(AuditEvent(kind, details))


def _outcome(result: Any) -> Tuple[bool, Optional[str]]:
    """(success, error_code) read from a response envelope dict."""
    if not isinstance(result, dict) or result.get("success", True):
        return True, None
    return False, (result.get("data") or {}).get("error_code")


T = TypeVar("T")


def mcp_tool(
    tool_name: Optional[str] = None, emit_metrics: bool = True, audit: bool = True
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Instrument a tool handler.

    The call runs under the caller's correlation ID, or a new ``tool_`` one.
    Afterwards an invocation counter, a latency timer and a
    ``tool_invocation`` audit event are written. An envelope with
    ``success: false`` counts as an error; an exception is recorded with
    error code ``UNHANDLED`` and re-raised.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = tool_name or func.__name__

        def finish(corr_id: str, started: float, success: bool, error_code: Optional[str]) -> None:
            duration_ms = (time.perf_counter() - started) * 1000
            if emit_metrics:
                status = "success" if success else "error"
                _metrics.counter("tool.invocations", labels={"tool": name, "status": status})
                _metrics.timer("tool.latency", duration_ms, labels={"tool": name})
            if audit:
                _audit.tool_invocation(
                    name,
                    success=success,
                    duration_ms=round(duration_ms, 2),
                    correlation_id=corr_id,
                    error_code=error_code,
                )

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> T:
                corr_id = get_correlation_id() or generate_correlation_id(prefix="tool")
                with sync_request_context(correlation_id=corr_id):
                    started = time.perf_counter()
                    try:
                        result = await func(*args, **kwargs)
                    except Exception:
                        finish(corr_id, started, False, "UNHANDLED")
                        raise
                    finish(corr_id, started, *_outcome(result))
                    return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> T:
            corr_id = get_correlation_id() or generate_correlation_id(prefix="tool")
            with sync_request_context(correlation_id=corr_id):
                started = time.perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    finish(corr_id, started, False, "UNHANDLED")
                    raise
                finish(corr_id, started, *_outcome(result))
                return result

        return sync_wrapper

    return decorator
