# (c) Copyright IBM Corp. 2025

import re
from typing import Iterator, List, Optional, Sequence, Tuple

from tracewire.exceptions import InvalidArgumentError
from tracewire.log import logger

KEY_MAX_SIZE = 256
VALUE_MAX_SIZE = 256
MAX_TENANT_ID_SIZE = 240
MAX_VENDOR_ID_SIZE = 13
MAX_KEY_VALUE_PAIRS = 32


def _is_lowercase_letter_or_digit(c: str) -> bool:
    return "a" <= c <= "z" or "0" <= c <= "9"


def _is_legal_key_character(c: str) -> bool:
    return _is_lowercase_letter_or_digit(c) or c in "_-@*/"


def validate_key(key: str) -> bool:
    """
    Key is an opaque string of up to 256 characters.  It starts with a
    lowercase letter and holds lowercase letters, digits, ``_``, ``-``, ``*``
    and ``/``.  The multi-tenant form ``tenant@vendor`` may start with a digit;
    the tenant id is at most 240 and the vendor id at most 13 characters.
    """
    if (
        not isinstance(key, str)
        or not key
        or len(key) > KEY_MAX_SIZE
        or not _is_lowercase_letter_or_digit(key[0])
    ):
        return False

    is_multi_tenant_vendor_key = False
    for i in range(1, len(key)):
        c = key[i]
        if not _is_legal_key_character(c):
            return False
        if c == "@":
            # only one '@' is allowed
            if is_multi_tenant_vendor_key:
                return False
            is_multi_tenant_vendor_key = True
            if i > MAX_TENANT_ID_SIZE:
                return False
            if len(key) - i > MAX_VENDOR_ID_SIZE:
                return False

    if not is_multi_tenant_vendor_key:
        return not ("0" <= key[0] <= "9")
    return True


def validate_value(value: str) -> bool:
    """
    Value is an opaque string of up to 256 printable ASCII characters
    (0x20 - 0x7E) other than ``,`` and ``=``, not ending in a space.
    """
    if not isinstance(value, str) or not value or len(value) > VALUE_MAX_SIZE:
        return False
    if value[-1] == " ":
        return False
    for c in value:
        if c == "," or c == "=" or c < " " or c > "~":
            return False
    return True


class TraceState(object):
    """
    Ordered, immutable list of vendor key/value pairs from the tracestate
    header.  Keys are not deduplicated here: get() returns the first match
    and TraceStateBuilder.set() is the replace-and-move-to-front operation.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Sequence[Tuple[str, str]] = ()) -> None:
        entries = tuple((k, v) for k, v in entries)
        if len(entries) > MAX_KEY_VALUE_PAIRS:
            raise InvalidArgumentError("TraceState has too many elements.")
        self._entries = entries

    @staticmethod
    def get_default() -> "TraceState":
        return _DEFAULT

    @staticmethod
    def builder() -> "TraceStateBuilder":
        return TraceStateBuilder(_DEFAULT)

    def to_builder(self) -> "TraceStateBuilder":
        return TraceStateBuilder(self)

    @property
    def entries(self) -> Tuple[Tuple[str, str], ...]:
        return self._entries

    def get(self, key: str) -> Optional[str]:
        for k, v in self._entries:
            if k == key:
                return v
        return None

    def size(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._entries)

    def items(self) -> Tuple[Tuple[str, str], ...]:
        return self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TraceState):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}={v}" for k, v in self._entries)
        return f"{type(self).__name__}([{pairs}])"


class TraceStateBuilder(object):
    def __init__(self, parent: TraceState) -> None:
        self._parent = parent
        self._entries: Optional[List[Tuple[str, str]]] = None

    def _copy_parent(self) -> List[Tuple[str, str]]:
        if self._entries is None:
            self._entries = list(self._parent.entries)
        return self._entries

    @staticmethod
    def _check(key: str, value: str) -> None:
        if not validate_key(key):
            raise InvalidArgumentError(f"Invalid key {key}")
        if not validate_value(value):
            raise InvalidArgumentError(f"Invalid value {value}")

    def prepend(self, key: str, value: str) -> "TraceStateBuilder":
        """Inserts the pair at the front, keeping any existing pair with the same key."""
        self._check(key, value)
        self._copy_parent().insert(0, (key, value))
        return self

    def set(self, key: str, value: str) -> "TraceStateBuilder":
        """Removes the first pair with the same key, then inserts at the front."""
        self._check(key, value)
        self.remove(key)
        self._entries.insert(0, (key, value))
        return self

    def remove(self, key: str) -> "TraceStateBuilder":
        entries = self._copy_parent()
        for i, (k, _) in enumerate(entries):
            if k == key:
                del entries[i]
                break
        return self

    def build(self) -> TraceState:
        if self._entries is None:
            return self._parent
        return TraceState(self._entries)


_DEFAULT = TraceState()


class Tracestate:
    """Text codec for the W3C tracestate header"""

    MAX_NUMBER_OF_LIST_MEMBERS = MAX_KEY_VALUE_PAIRS
    MAX_SIZE = 512
    REMOVE_ENTRIES_LARGER_THAN = 128
    KEY_VALUE_DELIMITER = "="
    ENTRY_DELIMITER = ","
    ENTRY_DELIMITER_SPLIT_REGEX = re.compile("[ \t]*,[ \t]*")

    def parse(self, tracestate: str) -> TraceState:
        """
        Parses the tracestate header, keeping the order of its list members.

        :param tracestate: the header value
        :return: TraceState
        :raises InvalidArgumentError: too many members, or a malformed member
        """
        if not isinstance(tracestate, str):
            raise InvalidArgumentError(f"Unparseable tracestate header: {tracestate!r}")

        # Empty list members are allowed and ignored.
        list_members = [
            m
            for m in self.ENTRY_DELIMITER_SPLIT_REGEX.split(tracestate.strip(" \t"))
            if m
        ]
        if len(list_members) > self.MAX_NUMBER_OF_LIST_MEMBERS:
            raise InvalidArgumentError("TraceState has too many elements.")

        builder = TraceState.builder()
        # The builder adds at the front, so walking backwards keeps header order.
        for list_member in reversed(list_members):
            index = list_member.find(self.KEY_VALUE_DELIMITER)
            if index == -1:
                raise InvalidArgumentError("Invalid TraceState list-member format.")
            builder.prepend(list_member[:index], list_member[index + 1:])
        return builder.build()

    def serialize(self, trace_state: TraceState) -> str:
        """
        Writes the members in stored order.  When the result would be longer
        than 512 characters, members longer than 128 characters are dropped
        first, from the end, then remaining members from the end until it fits.
        """
        list_members = [
            f"{key}{self.KEY_VALUE_DELIMITER}{value}" for key, value in trace_state.items()
        ]

        def size() -> int:
            return sum(len(m) for m in list_members) + max(len(list_members) - 1, 0)

        if size() > self.MAX_SIZE:
            logger.debug("tracestate longer than %d characters, truncating", self.MAX_SIZE)
            for i in reversed(range(len(list_members))):
                if len(list_members[i]) > self.REMOVE_ENTRIES_LARGER_THAN:
                    list_members.pop(i)
                    if size() <= self.MAX_SIZE:
                        break
            while size() > self.MAX_SIZE:
                list_members.pop()

        return self.ENTRY_DELIMITER.join(list_members)
