"""Input limits and sanitization for task tool arguments.

Free-text fields (``title``, ``notes``, ``taskId``) are length-checked on the
raw value and then sanitized. Sanitization removes ASCII control characters
(``\\x00``-``\\x1f`` and ``\\x7f``) and surrounding whitespace.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from google_tasks_mcp.core.errors import InvalidArgumentsError

MAX_TITLE_LENGTH = 256
MAX_NOTES_LENGTH = 8192
MAX_TASK_ID_LENGTH = 256

STATUS_NEEDS_ACTION = "needsAction"
STATUS_COMPLETED = "completed"
VALID_TASK_STATUSES = (STATUS_NEEDS_ACTION, STATUS_COMPLETED)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_string(value: Any) -> str:
    """Strip ASCII control characters and leading/trailing whitespace.

    Control characters are removed first, so whitespace they were hiding
    behind (``"Buy milk \\x01"``) is trimmed as well.

    Raises:
        InvalidArgumentsError: If ``value`` is not a string.
    """
    if not isinstance(value, str):
        raise InvalidArgumentsError("Input must be a string")
    return _CONTROL_CHARS.sub("", value).strip()


def is_valid_task_status(status: Any) -> bool:
    return isinstance(status, str) and status in VALID_TASK_STATUSES


def require_text(
    arguments: dict,
    key: str,
    *,
    action: str,
    max_length: int,
    label: str,
) -> str:
    """Validate and sanitize a required free-text argument.

    The length ceiling applies to the raw value, so anything longer than
    ``max_length`` is rejected regardless of what sanitization would remove.
    """
    raw = arguments.get(key)
    if not isinstance(raw, str) or not raw:
        raise InvalidArgumentsError(
            f"Invalid field '{key}' for {action}: must be a non-empty string",
            field=key,
            action=action,
            remediation=f"Provide a non-empty '{key}' value",
        )
    if len(raw) > max_length:
        raise InvalidArgumentsError(
            f"Invalid field '{key}' for {action}: exceeds {max_length} characters",
            field=key,
            action=action,
            remediation=f"Shorten '{key}' to at most {max_length} characters",
        )
    sanitized = sanitize_string(raw)
    if not sanitized:
        raise InvalidArgumentsError(
            f"{label} cannot be empty after sanitization.",
            field=key,
            action=action,
            remediation=f"Provide a '{key}' with visible characters",
        )
    return sanitized


def optional_text(
    arguments: dict,
    key: str,
    *,
    action: str,
    max_length: int,
) -> Optional[str]:
    """Validate and sanitize an optional free-text argument.

    Returns None when the argument is absent or sanitizes to an empty string.
    """
    raw = arguments.get(key)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise InvalidArgumentsError(
            f"Invalid field '{key}' for {action}: must be a string",
            field=key,
            action=action,
            remediation=f"Provide '{key}' as a string",
        )
    if len(raw) > max_length:
        raise InvalidArgumentsError(
            f"Invalid field '{key}' for {action}: exceeds {max_length} characters",
            field=key,
            action=action,
            remediation=f"Shorten '{key}' to at most {max_length} characters",
        )
    return sanitize_string(raw) or None


def validate_status(status: Any, *, action: str) -> str:
    """Check a status against the enumerated set and return it unchanged."""
    if not is_valid_task_status(status):
        allowed = " or ".join(f"'{s}'" for s in VALID_TASK_STATUSES)
        raise InvalidArgumentsError(
            f"Invalid task status. Must be {allowed}.",
            field="status",
            action=action,
            remediation=f"Use one of: {', '.join(VALID_TASK_STATUSES)}",
        )
    return status


__all__ = [
    "MAX_TITLE_LENGTH",
    "MAX_NOTES_LENGTH",
    "MAX_TASK_ID_LENGTH",
    "STATUS_NEEDS_ACTION",
    "STATUS_COMPLETED",
    "VALID_TASK_STATUSES",
    "sanitize_string",
    "is_valid_task_status",
    "require_text",
    "optional_text",
    "validate_status",
]
