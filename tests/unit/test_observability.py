"""Unit tests for logging and tracing helpers."""

import io
import json
import logging

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
import pytest

from corpus_search.observability import (
    JsonFormatter,
    bind_span_ids,
    configure_logging,
    create_span,
    get_trace_context,
    tracing as tracing_module,
)


def _record(msg="test message", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="corpus_search.search.index",
        level=level,
        pathname="index.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Tests for structured JSON logging."""

    def test_format_includes_trace_context(self):
        bind_span_ids(int("a" * 32, 16), int("b" * 16, 16))
        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "test message"
        assert data["level"] == "INFO"
        assert data["component"] == "index"
        assert data["trace_id"] == "a" * 32
        assert data["span_id"] == "b" * 16
        assert "timestamp" in data

    def test_format_includes_extra_fields(self):
        data = json.loads(JsonFormatter().format(_record(path="docs/a.txt", documents=3)))
        assert data["path"] == "docs/a.txt"
        assert data["documents"] == 3
        assert "pathname" not in data
        assert "lineno" not in data

    def test_format_truncates_long_values(self):
        data = json.loads(JsonFormatter().format(_record(msg="x" * 5000, query="q" * 600)))
        assert data["message"].endswith("...")
        assert len(data["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert len(data["query"]) == JsonFormatter.MAX_FIELD_LEN + 3

    def test_json_default_handles_set_and_bytes(self):
        formatter = JsonFormatter()
        assert formatter._json_default({3, 1, 2}) == [1, 2, 3]
        assert formatter._json_default(b"ok") == "ok"


class TestTraceContext:
    def test_get_trace_context_generates_ids(self):
        ctx = get_trace_context()
        assert len(ctx["trace_id"]) == 32
        assert len(ctx["span_id"]) == 16
        assert get_trace_context() == ctx

    def test_bind_span_ids_pads_hex_ids(self):
        bind_span_ids(1, 2)
        assert get_trace_context() == {"trace_id": "0" * 31 + "1", "span_id": "0" * 15 + "2"}


class TestConfigureLogging:
    def test_plain_output(self):
        stream = io.StringIO()
        configure_logging("warning", stream=stream)
        logging.getLogger("corpus_search.test").warning("careful")
        logging.getLogger("corpus_search.test").info("hidden")
        assert stream.getvalue() == "WARNING: careful\n"

    def test_json_output_and_overrides(self):
        stream = io.StringIO()
        configure_logging("info", json_output=True, logger_levels={"noisy": "error"}, stream=stream)
        logging.getLogger("noisy").warning("suppressed")
        logging.getLogger("corpus_search.test").info("shown")
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "shown"
        logging.getLogger("noisy").setLevel(logging.NOTSET)


class TestCreateSpan:
    @pytest.fixture
    def exporter(self, monkeypatch):
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("test"))
        return exporter

    def test_span_records_attributes_and_updates_log_context(self, exporter):
        with create_span("index.search", attributes={"search.query": "apple"}) as span:
            ctx = get_trace_context()
            assert ctx["span_id"] == format(span.get_span_context().span_id, "016x")

        (finished,) = exporter.get_finished_spans()
        assert finished.name == "index.search"
        assert finished.attributes["search.query"] == "apple"

    def test_span_records_errors(self, exporter):
        with pytest.raises(RuntimeError), create_span("index.build"):
            raise RuntimeError("boom")

        (finished,) = exporter.get_finished_spans()
        assert finished.status.status_code is StatusCode.ERROR
        assert finished.events[0].name == "exception"
