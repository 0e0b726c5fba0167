# (c) Copyright IBM Corp. 2025

import os
import random
import time
from typing import List, Optional, Union

from opentelemetry.trace.span import (
    _SPAN_ID_MAX_VALUE,
    _TRACE_ID_MAX_VALUE,
    INVALID_SPAN_ID,
    INVALID_TRACE_ID,
    format_span_id,
    format_trace_id,
)

from tracewire.exceptions import InvalidEncodingError, OutOfRangeError

TRACE_ID_BYTES = 16
SPAN_ID_BYTES = 8
TRACE_ID_HEX_LENGTH = 2 * TRACE_ID_BYTES
SPAN_ID_HEX_LENGTH = 2 * SPAN_ID_BYTES

_HEX_DIGITS = "0123456789abcdef"

# Two lowercase hex characters for every byte value.
_BYTE_TO_HEX = tuple(_HEX_DIGITS[b >> 4] + _HEX_DIGITS[b & 0xF] for b in range(256))

# Radix-16 digit value for every accepted character, upper and lower case.
_HEX_TO_DIGIT = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}

_rnd = random.Random()
_current_pid = 0


def generate_id() -> int:
    """Get a new ID.

    Returns:
        A non-zero 64-bit int for use as a Span ID.
    """
    global _current_pid

    pid = os.getpid()
    if _current_pid != pid:
        _current_pid = pid
        _rnd.seed(int(1000000 * time.time()) ^ pid)

    new_id = INVALID_SPAN_ID
    while new_id == INVALID_SPAN_ID:
        new_id = _rnd.randint(0, _SPAN_ID_MAX_VALUE)
    return new_id


def generate_trace_id() -> int:
    """Get a new non-zero 128-bit Trace ID."""
    return (generate_id() << 64) | generate_id()


def bytes_to_hex(data: Union[bytes, bytearray], dest: List[str], offset: int) -> None:
    """
    Writes the lowercase hex form of data into dest, two characters per byte,
    starting at offset. dest must already be long enough.

    :param data: the bytes to encode
    :param dest: character buffer owned by the caller
    :param offset: index in dest where the first character goes
    """
    for i, b in enumerate(data):
        pair = _BYTE_TO_HEX[b]
        dest[offset + 2 * i] = pair[0]
        dest[offset + 2 * i + 1] = pair[1]


def bytes_to_hex_str(data: Union[bytes, bytearray]) -> str:
    dest = [""] * (2 * len(data))
    bytes_to_hex(data, dest, 0)
    return "".join(dest)


def hex_digit(text: str, index: int) -> int:
    """
    Returns the radix-16 value of the character at index.

    :raises InvalidEncodingError: when the character is not a hex digit
    """
    char = text[index]
    value = _HEX_TO_DIGIT.get(char, -1)
    if value == -1:
        raise InvalidEncodingError(char, index)
    return value


def _check_range(text: str, offset: int, digits: int) -> None:
    if offset < 0 or offset + digits > len(text):
        raise OutOfRangeError(
            f"Need {digits} hex characters at offset {offset}, have {max(len(text) - offset, 0)}"
        )


def hex_to_bytes(text: str, offset: int = 0, length: Optional[int] = None) -> bytes:
    """
    Decodes pairs of hex characters into bytes.

    :param text: source text
    :param offset: index of the first hex character
    :param length: number of bytes to read, defaults to the rest of text
    :raises OutOfRangeError: odd or truncated input
    :raises InvalidEncodingError: a non hex character
    """
    if length is None:
        remaining = len(text) - offset
        if remaining < 0 or remaining % 2 != 0:
            raise OutOfRangeError(f"Odd number of hex characters: {remaining}")
        length = remaining // 2

    _check_range(text, offset, 2 * length)
    return bytes(
        (hex_digit(text, offset + 2 * i) << 4) | hex_digit(text, offset + 2 * i + 1)
        for i in range(length)
    )


def _hex_to_int(text: str, offset: int, digits: int) -> int:
    _check_range(text, offset, digits)
    result = 0
    # Most significant digit first, independent of host byte order.
    for i in range(offset, offset + digits):
        result = (result << 4) | hex_digit(text, i)
    return result


def hex_to_long(text: str, offset: int = 0) -> int:
    """Reads 16 hex characters at offset as a big-endian 64-bit unsigned int."""
    return _hex_to_int(text, offset, SPAN_ID_HEX_LENGTH)


def hex_to_trace_id(text: str, offset: int = 0) -> int:
    """Reads 32 hex characters at offset as a big-endian 128-bit unsigned int."""
    return _hex_to_int(text, offset, TRACE_ID_HEX_LENGTH)


def trace_id_to_hex(trace_id: int) -> str:
    return format_trace_id(trace_id)


def span_id_to_hex(span_id: int) -> str:
    return format_span_id(span_id)


def _is_valid_id_hex(value: str, length: int) -> bool:
    if not isinstance(value, str) or len(value) != length:
        return False
    if any(c not in _HEX_DIGITS for c in value):
        return False
    return value != "0" * length


def is_valid_trace_id_hex(value: str) -> bool:
    """True for 32 lowercase hex characters that are not all zero."""
    return _is_valid_id_hex(value, TRACE_ID_HEX_LENGTH)


def is_valid_span_id_hex(value: str) -> bool:
    """True for 16 lowercase hex characters that are not all zero."""
    return _is_valid_id_hex(value, SPAN_ID_HEX_LENGTH)


def is_valid_trace_id(trace_id: int) -> bool:
    return INVALID_TRACE_ID < trace_id <= _TRACE_ID_MAX_VALUE


def is_valid_span_id(span_id: int) -> bool:
    return INVALID_SPAN_ID < span_id <= _SPAN_ID_MAX_VALUE
