# (c) Copyright IBM Corp. 2025

from typing import Generator

import pytest
from opentelemetry import trace
from opentelemetry.trace.span import TraceFlags

from tracewire.propagators.base_propagator import PropagatedContext
from tracewire.propagators.tracecontext_propagator import TraceContextPropagator
from tracewire.span_context import INVALID_SPAN_CONTEXT, SpanContext
from tracewire.w3c_trace_context.tracestate import TraceState


class TestTraceContextPropagator:
    @pytest.fixture(autouse=True)
    def _resources(self) -> Generator[None, None, None]:
        self.propagator = TraceContextPropagator()
        yield

    @pytest.fixture(scope="function")
    def _tracestate(self) -> str:
        return "congo=t61rcWkgMzE,rojo=00f067aa0ba902b7"

    def test_fields(self) -> None:
        assert self.propagator.fields() == ("traceparent", "tracestate")

    def test_inject(
        self, span_context: SpanContext, traceparent: str, _tracestate: str
    ) -> None:
        carrier = {}
        self.propagator.inject(span_context, carrier)
        assert carrier == {"traceparent": traceparent, "tracestate": _tracestate}

    def test_inject_without_trace_state(
        self, trace_id: int, span_id: int, traceparent: str
    ) -> None:
        span_context = SpanContext(
            trace_id, span_id, is_remote=False, trace_flags=TraceFlags(1)
        )
        carrier = []
        self.propagator.inject(span_context, carrier)
        assert carrier == [("traceparent", traceparent)]

    def test_inject_opentelemetry_span_context(
        self, trace_id: int, span_id: int, traceparent: str, _tracestate: str
    ) -> None:
        span_context = trace.SpanContext(
            trace_id,
            span_id,
            is_remote=False,
            trace_flags=TraceFlags(1),
            trace_state=trace.TraceState(
                [("congo", "t61rcWkgMzE"), ("rojo", "00f067aa0ba902b7")]
            ),
        )
        carrier = {}
        self.propagator.inject(span_context, carrier)
        assert carrier == {"traceparent": traceparent, "tracestate": _tracestate}

    @pytest.mark.parametrize("span_context", [INVALID_SPAN_CONTEXT, None])
    def test_inject_invalid_context(self, span_context) -> None:
        carrier = {}
        self.propagator.inject(span_context, carrier)
        assert carrier == {}

    def test_extract(
        self, traceparent: str, _tracestate: str, trace_id: int, span_id: int
    ) -> None:
        span_context = self.propagator.extract(
            {"traceparent": traceparent, "tracestate": _tracestate}
        )

        assert span_context.trace_id == trace_id
        assert span_context.span_id == span_id
        assert span_context.is_remote
        assert span_context.sampled
        assert list(span_context.trace_state) == [
            ("congo", "t61rcWkgMzE"),
            ("rojo", "00f067aa0ba902b7"),
        ]

    @pytest.mark.parametrize(
        "carrier_type", ["dict", "wsgi", "bytes", "list"]
    )
    def test_extract_carrier_types(
        self, carrier_type: str, traceparent: str, _tracestate: str, trace_id: int
    ) -> None:
        if carrier_type == "dict":
            carrier = {"Traceparent": traceparent, "Tracestate": _tracestate}
        elif carrier_type == "wsgi":
            carrier = {"HTTP_TRACEPARENT": traceparent, "HTTP_TRACESTATE": _tracestate}
        elif carrier_type == "bytes":
            carrier = {
                b"traceparent": traceparent.encode(),
                b"tracestate": _tracestate.encode(),
            }
        else:
            carrier = [("traceparent", traceparent), ("tracestate", _tracestate)]

        span_context = self.propagator.extract(carrier)

        assert span_context.trace_id == trace_id
        assert span_context.trace_state.get("congo") == "t61rcWkgMzE"

    @pytest.mark.parametrize(
        "carrier",
        [
            {},
            None,
            "not a carrier",
            {"traceparent": "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7"},
            {"traceparent": "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902g7-01"},
            {"traceparent": "00-4BF92F3577B34DA6A3CE929D0E0E4736-00f067aa0ba902b7-01"},
            {"traceparent": "ff-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"},
            {"traceparent": 1234},
        ],
    )
    def test_extract_invalid(self, carrier) -> None:
        assert self.propagator.extract(carrier) is INVALID_SPAN_CONTEXT

    @pytest.mark.parametrize(
        "tracestate",
        ["congo", "Invalid=1", ",".join(f"k{i}=v" for i in range(33))],
    )
    def test_extract_invalid_tracestate_keeps_traceparent(
        self, traceparent: str, trace_id: int, tracestate: str
    ) -> None:
        span_context = self.propagator.extract(
            {"traceparent": traceparent, "tracestate": tracestate}
        )
        assert span_context.trace_id == trace_id
        assert span_context.trace_state.is_empty()

    def test_round_trip(self, span_context: SpanContext) -> None:
        carrier = {}
        self.propagator.inject(span_context, carrier)
        extracted = self.propagator.extract(carrier)

        assert extracted.trace_id == span_context.trace_id
        assert extracted.span_id == span_context.span_id
        assert extracted.trace_flags == span_context.trace_flags
        assert extracted.trace_state == span_context.trace_state

    def test_extract_context(self, traceparent: str, span_id: int) -> None:
        context = PropagatedContext()
        assert self.propagator.extract_context(context, {}) is context

        updated = self.propagator.extract_context(context, {"traceparent": traceparent})
        assert updated.span_context.span_id == span_id
        assert updated.baggage is context.baggage

    def test_inject_context(self, span_context: SpanContext, traceparent: str) -> None:
        carrier = {}
        self.propagator.inject_context(PropagatedContext(span_context=span_context), carrier)
        assert carrier["traceparent"] == traceparent

    def test_long_trace_state_is_truncated(self, trace_id: int, span_id: int) -> None:
        trace_state = TraceState([(f"k{i:02d}", "v" * 60) for i in range(10)])
        span_context = SpanContext(trace_id, span_id, False, trace_state=trace_state)
        carrier = {}
        self.propagator.inject(span_context, carrier)
        assert len(carrier["tracestate"]) <= 512
