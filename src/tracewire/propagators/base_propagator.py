# (c) Copyright IBM Corp. 2025

from typing import Any, Dict, List, NamedTuple, Optional, Tuple, TypeVar

from tracewire.baggage import Baggage
from tracewire.log import logger
from tracewire.span_context import INVALID_SPAN_CONTEXT, SpanContext

# The carrier, typed here as CarrierT, can be a dict, a list, or a tuple.
# Using the traceparent header as an example, it can be in the following forms
# for extraction:
#   traceparent
#   Traceparent
#   HTTP_TRACEPARENT
#   b"traceparent"
#
# The third form above is found in places like a WSGI environ for incoming
# requests, the last one in ASGI scopes and Kafka message headers.
#
# For injection, we only write the standard lowercase form.
CarrierT = TypeVar("CarrierT", Dict, List, Tuple)


class PropagatedContext(NamedTuple):
    """What travels between processes: the remote span context and the baggage."""

    span_context: SpanContext = INVALID_SPAN_CONTEXT
    baggage: Baggage = Baggage.empty()


class BasePropagator(object):
    NAME = ""
    FIELDS: Tuple[str, ...] = ()
    ALT_PREFIX = "http_"

    def fields(self) -> Tuple[str, ...]:
        """The header names this propagator reads and writes."""
        return self.FIELDS

    @staticmethod
    def extract_headers_dict(carrier: CarrierT) -> Optional[Dict]:
        """
        This method converts the incoming carrier into a dict.

        :param carrier: CarrierT
        :return: Dict | None
        """
        dc = None
        try:
            if isinstance(carrier, dict):
                dc = carrier
            elif isinstance(carrier, (list, tuple)):
                dc = {}
                for header in carrier:
                    if isinstance(header, dict):
                        dc.update(header)
                    else:
                        dc[header[0]] = header[1]
            elif hasattr(carrier, "__dict__"):
                dc = carrier.__dict__
                if not dc:
                    dc = dict(carrier)
            else:
                dc = dict(carrier)
        except Exception:
            logger.debug(
                f"base_propagator extract_headers_dict: Couldn't convert - {carrier}"
            )

        return dc

    @staticmethod
    def normalize_headers(dc: Dict[Any, Any]) -> Dict[str, Any]:
        """
        Returns a copy of dc with lowercase string keys.  Byte keys are decoded,
        keys of any other type are dropped.
        """
        headers = {}
        for key, value in dc.items():
            if isinstance(key, bytes):
                key = key.decode("utf-8", "replace")
            if isinstance(key, str):
                headers[key.lower()] = value
        return headers

    def headers_from_carrier(self, carrier: CarrierT) -> Optional[Dict[str, Any]]:
        dc = self.extract_headers_dict(carrier=carrier)
        if dc is None:
            return None
        return self.normalize_headers(dc)

    def get_header(self, headers: Dict[str, Any], name: str) -> Optional[str]:
        """
        Search the normalized headers for name, in the standard or the
        alternate HTTP_ form, and return its value as text.

        :param headers: Dict - output of headers_from_carrier
        :param name: str - lowercase header name
        :return: str | None
        """
        value = headers.get(name)
        if value is None:
            value = headers.get(self.ALT_PREFIX + name)
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("utf-8")
        if value is not None and not isinstance(value, str):
            logger.debug(f"Ignoring {name} header of type {type(value)}")
            return None
        return value

    @staticmethod
    def inject_key_value(carrier: CarrierT, key: str, value: str) -> None:
        if isinstance(carrier, list):
            carrier.append((key, value))
        elif isinstance(carrier, dict) or "__setitem__" in dir(carrier):
            carrier[key] = value
        else:
            raise TypeError("Unsupported carrier type", type(carrier))

    def inject_context(self, context: PropagatedContext, carrier: CarrierT) -> None:
        raise NotImplementedError

    def extract_context(
        self, context: PropagatedContext, carrier: CarrierT
    ) -> PropagatedContext:
        raise NotImplementedError
