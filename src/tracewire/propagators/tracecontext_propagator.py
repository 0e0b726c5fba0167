# (c) Copyright IBM Corp. 2025

from tracewire.exceptions import (
    InvalidArgumentError,
    InvalidEncodingError,
    OutOfRangeError,
)
from tracewire.log import logger
from tracewire.propagators.base_propagator import (
    BasePropagator,
    CarrierT,
    PropagatedContext,
)
from tracewire.span_context import INVALID_SPAN_CONTEXT, SpanContext
from tracewire.w3c_trace_context.traceparent import Traceparent
from tracewire.w3c_trace_context.tracestate import Tracestate


class TraceContextPropagator(BasePropagator):
    """
    Propagator for the W3C traceparent and tracestate headers.

    Malformed headers never raise: extract() then returns an invalid span
    context, or a context without trace state when only tracestate is broken.
    """

    NAME = "tracecontext"
    HEADER_KEY_TRACEPARENT = "traceparent"
    HEADER_KEY_TRACESTATE = "tracestate"
    FIELDS = (HEADER_KEY_TRACEPARENT, HEADER_KEY_TRACESTATE)

    def __init__(self) -> None:
        self._tp = Traceparent()
        self._ts = Tracestate()

    def inject(self, span_context: SpanContext, carrier: CarrierT) -> None:
        if span_context is None or not span_context.is_valid:
            return

        try:
            self.inject_key_value(
                carrier, self.HEADER_KEY_TRACEPARENT, self._tp.encode(span_context)
            )
            if len(span_context.trace_state) == 0:
                return
            tracestate = self._ts.serialize(span_context.trace_state)
            if tracestate:
                self.inject_key_value(carrier, self.HEADER_KEY_TRACESTATE, tracestate)
        except Exception:
            logger.debug("tracecontext inject error:", exc_info=True)

    def extract(self, carrier: CarrierT) -> SpanContext:
        """
        Reads the remote span context from carrier.

        :param carrier: CarrierT
        :return: SpanContext, INVALID_SPAN_CONTEXT when absent or malformed
        """
        try:
            headers = self.headers_from_carrier(carrier)
            if headers is None:
                return INVALID_SPAN_CONTEXT

            traceparent = self.get_header(headers, self.HEADER_KEY_TRACEPARENT)
            if traceparent is None:
                return INVALID_SPAN_CONTEXT

            try:
                span_context = self._tp.decode(traceparent)
            except (InvalidArgumentError, InvalidEncodingError, OutOfRangeError):
                logger.debug(
                    "Unparseable traceparent header. Returning INVALID span context.",
                    exc_info=True,
                )
                return INVALID_SPAN_CONTEXT

            tracestate = self.get_header(headers, self.HEADER_KEY_TRACESTATE)
            if not tracestate:
                return span_context

            try:
                return span_context.with_trace_state(self._ts.parse(tracestate))
            except InvalidArgumentError:
                logger.debug(
                    "Unparseable tracestate header. Returning span context without state.",
                    exc_info=True,
                )
                return span_context

        except Exception:
            logger.debug("tracecontext extract error:", exc_info=True)
            return INVALID_SPAN_CONTEXT

    def inject_context(self, context: PropagatedContext, carrier: CarrierT) -> None:
        self.inject(context.span_context, carrier)

    def extract_context(
        self, context: PropagatedContext, carrier: CarrierT
    ) -> PropagatedContext:
        span_context = self.extract(carrier)
        if not span_context.is_valid:
            return context
        return context._replace(span_context=span_context)
