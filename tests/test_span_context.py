# (c) Copyright IBM Corp. 2025

from opentelemetry.trace import SpanContext as OtelSpanContext
from opentelemetry.trace.span import TraceFlags

from tracewire.span_context import INVALID_SPAN_CONTEXT, SpanContext
from tracewire.w3c_trace_context.tracestate import TraceState


class TestSpanContext:
    def test_span_context(
        self, span_context: SpanContext, trace_id_hex: str, span_id_hex: str
    ) -> None:
        assert isinstance(span_context, OtelSpanContext)
        assert span_context.is_valid
        assert not span_context.is_remote
        assert span_context.sampled
        assert span_context.trace_id_hex == trace_id_hex
        assert span_context.span_id_hex == span_id_hex
        assert span_context.trace_state.get("rojo") == "00f067aa0ba902b7"

    def test_defaults(self, trace_id: int, span_id: int) -> None:
        span_context = SpanContext(trace_id, span_id, is_remote=True)
        assert span_context.trace_flags == TraceFlags.DEFAULT
        assert not span_context.sampled
        assert span_context.trace_state is TraceState.get_default()

    def test_with_trace_state(self, span_context: SpanContext) -> None:
        trace_state = TraceState([("a", "1")])
        updated = span_context.with_trace_state(trace_state)

        assert updated.trace_state is trace_state
        assert updated.trace_id == span_context.trace_id
        assert updated.span_id == span_context.span_id
        assert updated.trace_flags == span_context.trace_flags
        assert span_context.trace_state.size() == 2

    def test_invalid_span_context(self) -> None:
        assert not INVALID_SPAN_CONTEXT.is_valid
        assert INVALID_SPAN_CONTEXT.trace_id_hex == "0" * 32
        assert INVALID_SPAN_CONTEXT.span_id_hex == "0" * 16

    def test_repr(self, span_context: SpanContext, trace_id_hex: str) -> None:
        text = repr(span_context)
        assert text.startswith("SpanContext(")
        assert f"trace_id=0x{trace_id_hex}" in text
        assert "trace_flags=0x01" in text
