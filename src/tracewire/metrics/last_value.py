# (c) Copyright IBM Corp. 2025

from typing import Optional, Union

from tracewire.metrics.aggregator import Aggregator
from tracewire.metrics.atomic import AtomicValue
from tracewire.metrics.point import DoublePoint, Labels, LongPoint


class _LastValueAggregator(Aggregator):
    """
    Keeps the most recent measurement.

    Merging overwrites the target, so concurrent writers race and the last
    one to store wins.  Instruments using it record once per collection.
    """

    def __init__(self) -> None:
        self.current: AtomicValue[Optional[Union[int, float]]] = AtomicValue(None)

    def merge_to_and_reset(self, other: Aggregator) -> None:
        self._check_mergeable(other)
        other.current.set(self.current.get_and_set(None))

    def get_value(self) -> Optional[Union[int, float]]:
        return self.current.get()


class LongLastValueAggregator(_LastValueAggregator):
    def record_long(self, value: int) -> None:
        self.current.set(value)

    def to_point(
        self, start_epoch_nanos: int, epoch_nanos: int, labels: Labels
    ) -> Optional[LongPoint]:
        value = self.current.get()
        if value is None:
            return None
        return LongPoint(start_epoch_nanos, epoch_nanos, labels, value)


class DoubleLastValueAggregator(_LastValueAggregator):
    def record_double(self, value: float) -> None:
        self.current.set(value)

    def to_point(
        self, start_epoch_nanos: int, epoch_nanos: int, labels: Labels
    ) -> Optional[DoublePoint]:
        value = self.current.get()
        if value is None:
            return None
        return DoublePoint(start_epoch_nanos, epoch_nanos, labels, value)
