# (c) Copyright IBM Corp. 2025

from typing import Optional

from tracewire.baggage import Baggage
from tracewire.baggage.element import EXCLUDED_KEY_CHARS
from tracewire.baggage.parser import Parser
from tracewire.baggage.percent import escape
from tracewire.log import logger
from tracewire.propagators.base_propagator import (
    BasePropagator,
    CarrierT,
    PropagatedContext,
)


def is_valid_key(key: str) -> bool:
    """A baggage key is an HTTP token: visible ASCII without separators."""
    if not isinstance(key, str) or not key:
        return False
    for char in key:
        code = ord(char)
        if code <= 32 or code >= 127 or char in EXCLUDED_KEY_CHARS:
            return False
    return True


# escape() leaves "," and ";" as they are, but inside a baggage header they
# delimit list members and properties.
def encode_value(value: str) -> str:
    return escape(value).replace(",", "%2C").replace(";", "%3B")


def encode_metadata(metadata: str) -> str:
    return escape(metadata).replace(",", "%2C")


class BaggagePropagator(BasePropagator):
    """Propagator for the W3C baggage header"""

    NAME = "baggage"
    HEADER_KEY_BAGGAGE = "baggage"
    FIELDS = (HEADER_KEY_BAGGAGE,)
    MEMBER_DELIMITER = ","
    METADATA_DELIMITER = ";"

    def encode(self, baggage: Baggage) -> str:
        """
        Writes the header value for baggage, members sorted by key.  Entries
        whose key is not a valid token are left out.
        """
        members = []
        for key in sorted(baggage):
            if not is_valid_key(key):
                logger.debug(f"Not propagating baggage entry with invalid key: {key!r}")
                continue
            entry = baggage[key]
            member = f"{key}={encode_value(entry.value)}"
            if entry.metadata:
                member += self.METADATA_DELIMITER + encode_metadata(entry.metadata)
            members.append(member)
        return self.MEMBER_DELIMITER.join(members)

    def inject(self, baggage: Optional[Baggage], carrier: CarrierT) -> None:
        if not baggage:
            return

        try:
            header = self.encode(baggage)
            if header:
                self.inject_key_value(carrier, self.HEADER_KEY_BAGGAGE, header)
        except Exception:
            logger.debug("baggage inject error:", exc_info=True)

    def extract(self, carrier: CarrierT) -> Baggage:
        """
        Reads the baggage header from carrier.  Malformed list members are
        skipped; any other failure discards the whole header.

        :param carrier: CarrierT
        :return: Baggage, empty when absent or unparseable
        """
        try:
            headers = self.headers_from_carrier(carrier)
            if headers is None:
                return Baggage.empty()

            header = self.get_header(headers, self.HEADER_KEY_BAGGAGE)
            if not header:
                return Baggage.empty()

            return Parser(header).parse_into(Baggage.builder()).build()
        except Exception:
            logger.debug("baggage extract error:", exc_info=True)
            return Baggage.empty()

    def inject_context(self, context: PropagatedContext, carrier: CarrierT) -> None:
        self.inject(context.baggage, carrier)

    def extract_context(
        self, context: PropagatedContext, carrier: CarrierT
    ) -> PropagatedContext:
        baggage = self.extract(carrier)
        if baggage.is_empty():
            return context
        return context._replace(baggage=baggage)
