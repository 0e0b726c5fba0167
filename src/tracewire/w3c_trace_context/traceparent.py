# (c) Copyright IBM Corp. 2025

import re
from typing import Optional, Tuple

from opentelemetry.trace.span import TraceFlags

from tracewire.exceptions import InvalidArgumentError, InvalidEncodingError
from tracewire.log import logger
from tracewire.span_context import SpanContext
from tracewire.util.ids import (
    SPAN_ID_BYTES,
    SPAN_ID_HEX_LENGTH,
    TRACE_ID_BYTES,
    TRACE_ID_HEX_LENGTH,
    bytes_to_hex,
    hex_to_bytes,
    hex_to_long,
    hex_to_trace_id,
    is_valid_span_id,
    is_valid_trace_id,
)

# See https://www.w3.org/TR/trace-context/#trace-flags for details on the bitmasks.
SAMPLED_BITMASK = 0b1

_LOWER_HEX_DIGITS = frozenset("0123456789abcdef")


class Traceparent:
    SPECIFICATION_VERSION = "00"
    DELIMITER = "-"
    VERSION_SIZE = 2
    DELIMITER_SIZE = 1
    TRACE_OPTION_HEX_SIZE = 2
    TRACE_ID_OFFSET = VERSION_SIZE + DELIMITER_SIZE
    SPAN_ID_OFFSET = TRACE_ID_OFFSET + TRACE_ID_HEX_LENGTH + DELIMITER_SIZE
    TRACE_OPTION_OFFSET = SPAN_ID_OFFSET + SPAN_ID_HEX_LENGTH + DELIMITER_SIZE
    TRACEPARENT_HEADER_SIZE = TRACE_OPTION_OFFSET + TRACE_OPTION_HEX_SIZE

    # A version is one byte; ff is reserved as invalid.
    VALID_VERSIONS = frozenset(format(i, "02x") for i in range(255))

    TRACEPARENT_REGEX = re.compile(
        "^(?!ff)[0-9a-f]{2}-(?!0{32})([0-9a-f]{32})-(?!0{16})([0-9a-f]{16})-[0-9a-f]{2}(-|$)"
    )

    # Character positions that must hold lowercase hex digits.
    _HEX_POSITIONS = (
        tuple(range(0, VERSION_SIZE))
        + tuple(range(TRACE_ID_OFFSET, TRACE_ID_OFFSET + TRACE_ID_HEX_LENGTH))
        + tuple(range(SPAN_ID_OFFSET, SPAN_ID_OFFSET + SPAN_ID_HEX_LENGTH))
        + tuple(range(TRACE_OPTION_OFFSET, TRACEPARENT_HEADER_SIZE))
    )

    def encode(self, span_context: SpanContext) -> str:
        """
        Writes the fixed width traceparent header for span_context.

        :param span_context: a valid span context
        :return: version-traceid-spanid-flags
        """
        chars = [""] * self.TRACEPARENT_HEADER_SIZE
        chars[0] = self.SPECIFICATION_VERSION[0]
        chars[1] = self.SPECIFICATION_VERSION[1]
        chars[self.TRACE_ID_OFFSET - 1] = self.DELIMITER
        bytes_to_hex(
            span_context.trace_id.to_bytes(TRACE_ID_BYTES, "big"),
            chars,
            self.TRACE_ID_OFFSET,
        )
        chars[self.SPAN_ID_OFFSET - 1] = self.DELIMITER
        bytes_to_hex(
            span_context.span_id.to_bytes(SPAN_ID_BYTES, "big"),
            chars,
            self.SPAN_ID_OFFSET,
        )
        chars[self.TRACE_OPTION_OFFSET - 1] = self.DELIMITER
        bytes_to_hex(
            bytes([int(span_context.trace_flags) & 0xFF]),
            chars,
            self.TRACE_OPTION_OFFSET,
        )
        return "".join(chars)

    def _check_layout(self, traceparent: str) -> None:
        size = self.TRACEPARENT_HEADER_SIZE
        is_valid = (
            (
                len(traceparent) == size
                or (len(traceparent) > size and traceparent[size] == self.DELIMITER)
            )
            and traceparent[self.TRACE_ID_OFFSET - 1] == self.DELIMITER
            and traceparent[self.SPAN_ID_OFFSET - 1] == self.DELIMITER
            and traceparent[self.TRACE_OPTION_OFFSET - 1] == self.DELIMITER
        )
        if not is_valid:
            raise InvalidArgumentError(f"Unparseable traceparent header: {traceparent!r}")

    def _check_lowercase_hex(self, traceparent: str) -> None:
        # Only lowercase digits are accepted, uppercase is rejected like any other character.
        for index in self._HEX_POSITIONS:
            if traceparent[index] not in _LOWER_HEX_DIGITS:
                raise InvalidEncodingError(traceparent[index], index)

    def decode(self, traceparent: str) -> SpanContext:
        """
        Parses a traceparent header into a remote span context.

        :param traceparent: the header value
        :return: SpanContext with is_remote set
        :raises InvalidArgumentError: wrong length, delimiter, version or an all-zero id
        :raises InvalidEncodingError: a character that is not a lowercase hex digit
        """
        if not isinstance(traceparent, str):
            raise InvalidArgumentError(f"Unparseable traceparent header: {traceparent!r}")

        self._check_layout(traceparent)
        self._check_lowercase_hex(traceparent)

        version = traceparent[: self.VERSION_SIZE]
        if version not in self.VALID_VERSIONS:
            raise InvalidArgumentError(f"Invalid traceparent version: {traceparent!r}")
        if (
            version == self.SPECIFICATION_VERSION
            and len(traceparent) > self.TRACEPARENT_HEADER_SIZE
        ):
            raise InvalidArgumentError(
                f"Version {version} traceparent has trailing data: {traceparent!r}"
            )

        trace_id = hex_to_trace_id(traceparent, self.TRACE_ID_OFFSET)
        span_id = hex_to_long(traceparent, self.SPAN_ID_OFFSET)
        flags = hex_to_bytes(traceparent, self.TRACE_OPTION_OFFSET, 1)[0]

        if not is_valid_trace_id(trace_id) or not is_valid_span_id(span_id):
            raise InvalidArgumentError(f"Invalid trace or span id: {traceparent!r}")

        return SpanContext(
            trace_id=trace_id,
            span_id=span_id,
            is_remote=True,
            trace_flags=TraceFlags(flags),
        )

    def validate(self, traceparent: str) -> Optional[str]:
        """
        Method used to validate the traceparent header
        :param traceparent: string
        :return: traceparent or None
        """
        try:
            if self.TRACEPARENT_REGEX.match(traceparent):
                return traceparent
        except Exception:
            logger.debug(
                "traceparent does not follow version {} specification".format(
                    self.SPECIFICATION_VERSION
                )
            )
        return None

    def get_traceparent_fields(
        self, traceparent: str
    ) -> Tuple[Optional[str], Optional[int], Optional[int], Optional[bool]]:
        """
        Parses the traceparent header into its fields and returns the fields
        :param traceparent: the traceparent header
        :return: version, trace_id, parent_id, sampled_flag
        """
        try:
            span_context = self.decode(traceparent)
        except (InvalidArgumentError, InvalidEncodingError) as err:
            logger.debug("Parsing the traceparent failed: {}".format(err))
            return None, None, None, None

        sampled_flag = (span_context.trace_flags & SAMPLED_BITMASK) == SAMPLED_BITMASK
        return (
            traceparent[: self.VERSION_SIZE],
            span_context.trace_id,
            span_context.span_id,
            sampled_flag,
        )
