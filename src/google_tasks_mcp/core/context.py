"""Per-invocation correlation state.

Each tool call or resource read gets an ID such as ``tool_3f9a0c1d2e4b``. The
ID is stamped on every log line, audit record and response envelope produced
while the call runs. It is held in ``contextvars``, so it survives ``await``
and is copied into the worker thread ``asyncio.to_thread`` uses for the
Google call.
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional

__all__ = [
    "correlation_id_var",
    "start_time_var",
    "RequestContext",
    "generate_correlation_id",
    "sync_request_context",
    "get_correlation_id",
    "get_start_time",
]

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
start_time_var: ContextVar[float] = ContextVar("start_time", default=0.0)


def generate_correlation_id(prefix: str = "req") -> str:
    """``<prefix>_`` followed by 12 random hex characters."""
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass(frozen=True)
class RequestContext:
    correlation_id: str
    start_time: float


@contextmanager
def sync_request_context(*, correlation_id: Optional[str] = None) -> Iterator[RequestContext]:
    """Bind a correlation ID and start time until the block exits.

    A fresh ``req_`` ID is generated when none is given. The previous values
    are restored on exit, so contexts nest.
    """
    ctx = RequestContext(
        correlation_id=correlation_id or generate_correlation_id(),
        start_time=time.time(),
    )
    tokens = (
        correlation_id_var.set(ctx.correlation_id),
        start_time_var.set(ctx.start_time),
    )
    try:
        yield ctx
    finally:
        correlation_id_var.reset(tokens[0])
        start_time_var.reset(tokens[1])


def get_correlation_id() -> str:
    return correlation_id_var.get()


def get_start_time() -> float:
    return start_time_var.get()
