# (c) Copyright IBM Corp. 2025

import typing

from opentelemetry.trace import SpanContext as OtelSpanContext
from opentelemetry.trace.span import (
    DEFAULT_TRACE_OPTIONS,
    INVALID_SPAN_ID,
    INVALID_TRACE_ID,
    TraceFlags,
    format_span_id,
    format_trace_id,
)

from tracewire.w3c_trace_context.tracestate import TraceState


class SpanContext(OtelSpanContext):
    """The trace context propagated between processes.

    This is the OpenTelemetry span context with its trace_state holding a
    tracewire TraceState, which keeps every list member of the tracestate
    header in order.

    Required Args:
        trace_id: The ID of the trace, 128 bits.
        span_id: The ID of the parent span, 64 bits.
        is_remote: True if propagated from a remote parent.
    """

    def __new__(
        cls,
        trace_id: int,
        span_id: int,
        is_remote: bool,
        trace_flags: typing.Optional[TraceFlags] = DEFAULT_TRACE_OPTIONS,
        trace_state: typing.Optional[TraceState] = None,
    ) -> "SpanContext":
        if trace_state is None:
            trace_state = TraceState.get_default()
        return super().__new__(cls, trace_id, span_id, is_remote, trace_flags, trace_state)

    @property
    def trace_id_hex(self) -> str:
        return format_trace_id(self.trace_id)

    @property
    def span_id_hex(self) -> str:
        return format_span_id(self.span_id)

    @property
    def sampled(self) -> bool:
        return TraceFlags(self.trace_flags).sampled

    def with_trace_state(self, trace_state: TraceState) -> "SpanContext":
        return SpanContext(
            self.trace_id, self.span_id, self.is_remote, self.trace_flags, trace_state
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(trace_id=0x{self.trace_id_hex}, span_id=0x{self.span_id_hex}, trace_flags=0x{self.trace_flags:02x}, trace_state={self.trace_state!r}, is_remote={self.is_remote})"


INVALID_SPAN_CONTEXT = SpanContext(INVALID_TRACE_ID, INVALID_SPAN_ID, is_remote=False)
