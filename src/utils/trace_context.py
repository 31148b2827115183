"""Trace ids that tie together the log lines of one market data request."""

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

_trace_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "market_trace_id", default=None
)


def create_trace() -> str:
    """
    Generate a new trace ID (UUID4) and set it in the current context.

    Returns:
        The new trace ID
    """
    trace_id = str(uuid.uuid4())
    set_trace(trace_id)
    return trace_id


def get_current_trace() -> str | None:
    """Return the current trace ID, or None if no trace is active."""
    return _trace_id_context.get()


def set_trace(trace_id: str | None) -> None:
    _trace_id_context.set(trace_id)


def clear_trace() -> None:
    """Clear the trace ID from the current context."""
    _trace_id_context.set(None)


@contextmanager
def trace_scope(trace_id: str | None = None) -> Iterator[str]:
    """
    Run a block under a trace ID, restoring the previous one afterwards.

    Args:
        trace_id: ID to use; a new UUID4 is generated when omitted

    Yields:
        The active trace ID
    """
    token = _trace_id_context.set(trace_id or str(uuid.uuid4()))
    try:
        yield _trace_id_context.get()
    finally:
        _trace_id_context.reset(token)
