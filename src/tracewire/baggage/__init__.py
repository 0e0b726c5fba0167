# (c) Copyright IBM Corp. 2025

"""
Baggage: application key/value pairs propagated next to a trace.

A Baggage is immutable.  New instances are made through a BaggageBuilder,
either from scratch or from an existing Baggage with to_builder().
"""

from collections.abc import Mapping
from typing import Dict, Iterator, NamedTuple, Optional


class BaggageEntry(NamedTuple):
    value: str
    metadata: str = ""


class Baggage(Mapping):
    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Dict[str, BaggageEntry]] = None) -> None:
        self._entries: Dict[str, BaggageEntry] = dict(entries or {})

    @staticmethod
    def empty() -> "Baggage":
        return _EMPTY

    @staticmethod
    def builder() -> "BaggageBuilder":
        return BaggageBuilder()

    def to_builder(self) -> "BaggageBuilder":
        return BaggageBuilder(self)

    def __getitem__(self, key: str) -> BaggageEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get_value(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def is_empty(self) -> bool:
        return not self._entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"


class BaggageBuilder(object):
    def __init__(self, parent: Optional[Baggage] = None) -> None:
        self._entries: Dict[str, BaggageEntry] = (
            dict(parent.items()) if parent is not None else {}
        )

    def put(self, key: str, value: str, metadata: str = "") -> "BaggageBuilder":
        """Adds or replaces the entry for key.  None keys or values are ignored."""
        if key is None or value is None:
            return self
        self._entries[key] = BaggageEntry(value, metadata or "")
        return self

    def remove(self, key: str) -> "BaggageBuilder":
        self._entries.pop(key, None)
        return self

    def build(self) -> Baggage:
        if not self._entries:
            return _EMPTY
        return Baggage(self._entries)


_EMPTY = Baggage()
