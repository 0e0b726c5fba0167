# (c) Copyright IBM Corp. 2025

"""
Single pass parser for the W3C ``baggage`` header.

    baggage     = list-member 0*179( OWS "," OWS list-member )
    list-member = key OWS "=" OWS value *( OWS ";" OWS property )

Each list member produces one ParseOutcome:

    Ok     - a decoded entry to add to the baggage
    Skip   - the member was malformed and is left out; parsing goes on
    Fatal  - an unexpected error; the whole header must be discarded
"""

from enum import Enum
from typing import Iterator, NamedTuple, Optional, Union

from tracewire.baggage import BaggageBuilder
from tracewire.baggage.element import Element
from tracewire.baggage.percent import decode
from tracewire.exceptions import InvalidArgumentError
from tracewire.log import logger


class ParserState(Enum):
    KEY = "key"
    VALUE = "value"
    META = "meta"


class Ok(NamedTuple):
    key: str
    value: str
    metadata: str = ""


class Skip(NamedTuple):
    reason: str


class Fatal(NamedTuple):
    error: Exception


ParseOutcome = Union[Ok, Skip, Fatal]


def _decode_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return decode(value)
    except InvalidArgumentError:
        logger.debug(f"Dropping baggage field with invalid encoding: {value!r}")
        return None


def to_outcome(
    key: Optional[str], value: Optional[str], metadata: Optional[str]
) -> ParseOutcome:
    """
    Percent-decodes value and metadata of one list member.  A field that
    fails to decode counts as absent; a member without key or value is
    skipped.
    """
    decoded_value = _decode_or_none(value)
    decoded_metadata = _decode_or_none(metadata)
    if not key or not decoded_value:
        return Skip("missing key or value")
    return Ok(key, decoded_value, decoded_metadata or "")


class Parser(object):
    def __init__(self, header: str) -> None:
        self.header = header
        self.key = Element.create_key_element()
        self.value = Element.create_value_element()
        self._reset(0)

    def _reset(self, index: int) -> None:
        self.skip_to_next = False
        self.skip_reason = ""
        self.state = ParserState.KEY
        self.key.reset(index)
        self.value.reset(index)
        self.meta: Optional[str] = None
        self.meta_start = 0

    def _set_state(self, state: ParserState, start: int) -> None:
        self.state = state
        if state is ParserState.VALUE:
            self.value.reset(start)
        elif state is ParserState.META:
            self.meta_start = start

    def _skip(self, reason: str) -> None:
        self.skip_to_next = True
        self.skip_reason = reason

    def _feed(self, element: Element, current: str, index: int) -> None:
        if not element.try_next_char(current, index):
            self._skip(f"invalid character {current!r} at index {index}")

    def _emit(self) -> ParseOutcome:
        return to_outcome(self.key.value, self.value.value, self.meta)

    def outcomes(self) -> Iterator[ParseOutcome]:
        """Yields one outcome per list member, in header order."""
        try:
            yield from self._scan()
        except Exception as e:
            yield Fatal(e)

    def _scan(self) -> Iterator[ParseOutcome]:
        header = self.header
        for index, current in enumerate(header):
            if self.skip_to_next:
                if current == ",":
                    yield Skip(self.skip_reason)
                    self._reset(index + 1)
                continue

            if current == "=":
                # Not fed to the value element: kept only once the value has started.
                if self.state is ParserState.KEY:
                    if self.key.try_terminating(index, header):
                        self._set_state(ParserState.VALUE, index + 1)
                    else:
                        self._skip("empty key")
            elif current == ";":
                if self.state is ParserState.VALUE:
                    if not self.value.try_terminating(index, header):
                        self._skip("empty value")
                    self._set_state(ParserState.META, index + 1)
                elif self.state is ParserState.KEY:
                    self._feed(self.key, current, index)
            elif current == ",":
                if self.state is ParserState.VALUE:
                    self.value.try_terminating(index, header)
                elif self.state is ParserState.META:
                    self.meta = header[self.meta_start:index].strip()
                yield self._emit()
                self._reset(index + 1)
            elif self.state is ParserState.KEY:
                self._feed(self.key, current, index)
            elif self.state is ParserState.VALUE:
                self._feed(self.value, current, index)

        # The last list member has no terminating comma.
        if self.skip_to_next:
            yield Skip(self.skip_reason)
        elif self.state is ParserState.KEY:
            if not self.key.leading_space:
                yield Skip("list member without value")
        elif self.state is ParserState.META:
            self.meta = header[self.meta_start:].strip()
            yield self._emit()
        elif self.state is ParserState.VALUE:
            self.value.try_terminating(len(header), header)
            yield self._emit()

    def parse_into(self, builder: BaggageBuilder) -> BaggageBuilder:
        """
        Adds every valid list member to builder.

        :raises Exception: the error of a Fatal outcome
        """
        for outcome in self.outcomes():
            if isinstance(outcome, Ok):
                builder.put(outcome.key, outcome.value, outcome.metadata)
            elif isinstance(outcome, Fatal):
                raise outcome.error
            else:
                logger.debug(f"Skipping baggage list member: {outcome.reason}")
        return builder
