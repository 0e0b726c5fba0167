# (c) Copyright IBM Corp. 2025

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class AtomicValue(Generic[T]):
    """A single value whose read-modify-write operations hold a lock."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value

    def get_and_set(self, value: T) -> T:
        with self._lock:
            previous = self._value
            self._value = value
            return previous

    def add(self, delta: T) -> T:
        with self._lock:
            self._value += delta
            return self._value
