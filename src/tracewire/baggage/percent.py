# (c) Copyright IBM Corp. 2025

"""
UTF-8 percent encoding for baggage values and metadata.

Safe characters are copied as they are; everything else is written as one
``%XX`` triplet per UTF-8 byte, with uppercase hex digits.
"""

from typing import List

from tracewire.exceptions import InvalidArgumentError

SAFE_CHARS = (
    "-._~"  # Unreserved characters.
    "!$'()*,;&=+"  # The subdelim characters.
    "@:"  # The gendelim characters permitted in paths.
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
)

_UPPER_HEX_DIGITS = "0123456789ABCDEF"

_HEX_VALUES = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}

_MIN_HIGH_SURROGATE = 0xD800
_MAX_HIGH_SURROGATE = 0xDBFF
_MIN_LOW_SURROGATE = 0xDC00
_MAX_LOW_SURROGATE = 0xDFFF


def _create_safe_octets(safe_chars: str) -> List[bool]:
    octets = [False] * (max(ord(c) for c in safe_chars) + 1)
    for c in safe_chars:
        octets[ord(c)] = True
    return octets


_SAFE_OCTETS = _create_safe_octets(SAFE_CHARS)


def _is_safe(cp: int) -> bool:
    return cp < len(_SAFE_OCTETS) and _SAFE_OCTETS[cp]


def _next_escape_index(s: str, index: int, end: int) -> int:
    while index < end and _is_safe(ord(s[index])):
        index += 1
    return index


def escape(s: str) -> str:
    """Escape the provided string, using percent-style URL encoding."""
    for index, c in enumerate(s):
        if not _is_safe(ord(c)):
            return _escape_slow(s, index)
    return s


def _code_point_at(s: str, index: int, end: int) -> int:
    """
    Returns the code point at index, joining a high/low surrogate pair that
    was stored as two separate characters.  Returns the negated high
    surrogate when it is the last character.
    """
    c1 = ord(s[index])
    if c1 < _MIN_HIGH_SURROGATE or c1 > _MAX_LOW_SURROGATE:
        return c1
    if c1 <= _MAX_HIGH_SURROGATE:
        index += 1
        if index == end:
            return -c1
        c2 = ord(s[index])
        if _MIN_LOW_SURROGATE <= c2 <= _MAX_LOW_SURROGATE:
            return 0x10000 + ((c1 - _MIN_HIGH_SURROGATE) << 10) + (c2 - _MIN_LOW_SURROGATE)
        raise InvalidArgumentError(
            f"Expected low surrogate but got char {s[index]!r} with value {c2} at index {index} in {s!r}"
        )
    raise InvalidArgumentError(
        f"Unexpected low surrogate character {s[index]!r} with value {c1} at index {index} in {s!r}"
    )


def _utf8_bytes(cp: int) -> List[int]:
    if cp <= 0x7F:
        return [cp]
    if cp <= 0x7FF:
        return [0xC0 | (cp >> 6), 0x80 | (cp & 0x3F)]
    if cp <= 0xFFFF:
        return [0xE0 | (cp >> 12), 0x80 | ((cp >> 6) & 0x3F), 0x80 | (cp & 0x3F)]
    if cp <= 0x10FFFF:
        return [
            0xF0 | (cp >> 18),
            0x80 | ((cp >> 12) & 0x3F),
            0x80 | ((cp >> 6) & 0x3F),
            0x80 | (cp & 0x3F),
        ]
    raise InvalidArgumentError(f"Invalid unicode character value {cp}")


def _escape_code_point(cp: int, dest: List[str]) -> None:
    for b in _utf8_bytes(cp):
        dest.append("%")
        dest.append(_UPPER_HEX_DIGITS[b >> 4])
        dest.append(_UPPER_HEX_DIGITS[b & 0xF])


def _escape_slow(s: str, index: int) -> str:
    end = len(s)
    # Local to this call, never shared between threads.
    dest: List[str] = []
    unescaped_chunk_start = 0

    while index < end:
        cp = _code_point_at(s, index, end)
        if cp < 0:
            raise InvalidArgumentError("Trailing high surrogate at end of input")

        paired = _MIN_HIGH_SURROGATE <= ord(s[index]) <= _MAX_HIGH_SURROGATE
        next_index = index + (2 if paired else 1)
        if not _is_safe(cp):
            if index > unescaped_chunk_start:
                dest.append(s[unescaped_chunk_start:index])
            _escape_code_point(cp, dest)
            unescaped_chunk_start = next_index
        index = _next_escape_index(s, next_index, end)

    if end > unescaped_chunk_start:
        dest.append(s[unescaped_chunk_start:end])
    return "".join(dest)


def _digit16(s: str, index: int) -> int:
    if index >= len(s):
        raise InvalidArgumentError(f"Invalid URL encoding: truncated escape in {s!r}")
    value = _HEX_VALUES.get(s[index], -1)
    if value == -1:
        raise InvalidArgumentError(
            f"Invalid URL encoding: not a valid digit (radix 16): {s[index]!r}"
        )
    return value


def decode(s: str, encoding: str = "utf-8") -> str:
    """
    Replaces every ``%XY`` triplet with the byte 0xXY.  The bytes are
    collected first and only then decoded with the given encoding.

    :raises InvalidArgumentError: for a truncated or non hex escape
    """
    if "%" not in s:
        return s

    buffer = bytearray()
    index = 0
    end = len(s)
    while index < end:
        c = s[index]
        if c == "%":
            upper = _digit16(s, index + 1)
            lower = _digit16(s, index + 2)
            buffer.append((upper << 4) + lower)
            index += 3
        else:
            buffer.extend(c.encode("utf-8", "surrogatepass"))
            index += 1
    return buffer.decode(encoding, "replace")
