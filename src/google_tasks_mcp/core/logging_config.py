"""Log output for the ``google_tasks_mcp`` logger tree.

Two output styles are available: one JSON object per line (``structured``,
the default) or a short prefix line meant for a terminal (``human``). Records
carry the correlation ID of the invocation that produced them, so the generic
message a caller receives can be traced to the logged cause.

Handlers always write to stderr because stdout is the MCP stdio channel.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO, Union

from google_tasks_mcp.core.context import get_correlation_id, get_start_time
from google_tasks_mcp.core.observability import redact_sensitive_data

__all__ = [
    "ContextFilter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "configure_logging",
]

ROOT_LOGGER_NAME = "google_tasks_mcp"

# Attribute names every LogRecord has; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName", "correlation_id", "elapsed_ms"}


class ContextFilter(logging.Filter):
    """Stamp ``correlation_id`` and ``elapsed_ms`` onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        started = get_start_time()
        record.correlation_id = get_correlation_id() or "-"
        record.elapsed_ms = round((time.time() - started) * 1000, 2) if started > 0 else 0.0
        return True


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class _RedactingFormatter(logging.Formatter):
    """Masks OAuth material in rendered tracebacks."""

    def formatException(self, ei) -> str:
        return redact_sensitive_data(super().formatException(ei))


class StructuredFormatter(_RedactingFormatter):
    """One JSON object per record.

    Values passed through ``extra=`` (audit events, metrics) are nested under
    ``"extra"``; values that cannot be serialized are stringified.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
            "elapsed_ms": getattr(record, "elapsed_ms", 0.0),
            "location": f"{record.filename}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        extra = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra
        return json.dumps(entry, default=str)


class HumanReadableFormatter(_RedactingFormatter):
    """``2026-01-15 10:30:45 [INFO] [tool_ab12] core.client: message``"""

    def __init__(self, *, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1:]

        parts = [f"[{record.levelname}]"]
        if self.include_timestamp:
            parts.insert(0, datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S"))
        correlation_id = getattr(record, "correlation_id", "-")
        if correlation_id not in ("", "-"):
            parts.append(f"[{correlation_id}]")
        parts.append(f"{name}: {record.getMessage()}")

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    *,
    level: Union[int, str] = logging.INFO,
    format: str = "structured",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install a single stderr handler on the ``google_tasks_mcp`` logger.

    ``format`` is ``"structured"`` or ``"human"``. Calling again replaces the
    handler from the previous call.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(
        StructuredFormatter() if format == "structured" else HumanReadableFormatter()
    )

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    return root
