"""Logging and tracing helpers."""

from corpus_search.observability.context import bind_span_ids, get_trace_context, trace_context
from corpus_search.observability.logging import JsonFormatter, configure_logging
from corpus_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "JsonFormatter",
    "bind_span_ids",
    "configure_logging",
    "create_span",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "trace_context",
]
