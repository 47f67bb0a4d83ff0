"""Trace ids attached to log records."""

from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4


trace_context: ContextVar[dict[str, str] | None] = ContextVar("trace_context", default=None)


def get_trace_context() -> dict[str, str]:
    """Return the ids of the current span, inventing a pair outside any span."""
    ctx = trace_context.get()
    if ctx is None:
        ctx = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        trace_context.set(ctx)
    return ctx


def bind_span_ids(trace_id: int, span_id: int) -> None:
    """Correlate subsequent log records with an OpenTelemetry span."""
    trace_context.set({"trace_id": format(trace_id, "032x"), "span_id": format(span_id, "016x")})
