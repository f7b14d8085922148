"""JSON output helpers for the google-tasks CLI.

Every command prints exactly one response-v2 envelope, minified, so the
output can be piped through ``jq`` or parsed by an agent.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Mapping, NoReturn, Optional

from google_tasks_mcp.core.context import generate_correlation_id, get_correlation_id
from google_tasks_mcp.core.responses import ErrorCode, ErrorType, error_response


def emit(data: Any) -> None:
    """Print ``data`` to stdout as one line of compact JSON."""
    print(json.dumps(data, separators=(",", ":"), default=str))


def emit_error(
    message: str,
    code: str = ErrorCode.INTERNAL_ERROR.value,
    *,
    error_type: str = ErrorType.INTERNAL.value,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    """Print an error envelope to stderr, then exit with status 1."""
    response = error_response(
        message,
        error_code=code,
        error_type=error_type,
        remediation=remediation,
        details=details,
        request_id=get_correlation_id() or generate_correlation_id(prefix="cli"),
    )
    print(json.dumps(asdict(response), separators=(",", ":"), default=str), file=sys.stderr)
    sys.exit(1)
