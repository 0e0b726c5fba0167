# (c) Copyright IBM Corp. 2025

import os
from typing import Generator

import pytest
from opentelemetry.trace.span import TraceFlags

from tracewire.span_context import SpanContext
from tracewire.w3c_trace_context.tracestate import TraceState

TRACEWIRE_ENV_VARS = (
    "TRACEWIRE_DEBUG",
    "TRACEWIRE_LOG_LEVEL",
    "TRACEWIRE_PROPAGATORS",
    "TRACEWIRE_COLLECTION_INTERVAL",
    "TRACEWIRE_CONFIG_PATH",
)


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[None, None, None]:
    """Remove the TRACEWIRE_* variables for the duration of each test."""
    saved = {name: os.environ.pop(name) for name in TRACEWIRE_ENV_VARS if name in os.environ}
    yield
    for name in TRACEWIRE_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


@pytest.fixture
def trace_id_hex() -> str:
    return "4bf92f3577b34da6a3ce929d0e0e4736"


@pytest.fixture
def span_id_hex() -> str:
    return "00f067aa0ba902b7"


@pytest.fixture
def trace_id(trace_id_hex: str) -> int:
    return int(trace_id_hex, 16)


@pytest.fixture
def span_id(span_id_hex: str) -> int:
    return int(span_id_hex, 16)


@pytest.fixture
def traceparent(trace_id_hex: str, span_id_hex: str) -> str:
    return f"00-{trace_id_hex}-{span_id_hex}-01"


@pytest.fixture
def span_context(trace_id: int, span_id: int) -> SpanContext:
    return SpanContext(
        trace_id=trace_id,
        span_id=span_id,
        is_remote=False,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
        trace_state=TraceState([("congo", "t61rcWkgMzE"), ("rojo", "00f067aa0ba902b7")]),
    )
