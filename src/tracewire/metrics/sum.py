# (c) Copyright IBM Corp. 2025

from typing import Union

from tracewire.metrics.aggregator import Aggregator
from tracewire.metrics.atomic import AtomicValue
from tracewire.metrics.point import DoublePoint, Labels, LongPoint


class _SumAggregator(Aggregator):
    """Adds up every measurement.  Merging adds into the target."""

    IDENTITY: Union[int, float] = 0

    def __init__(self) -> None:
        self.current = AtomicValue(self.IDENTITY)

    def merge_to_and_reset(self, other: Aggregator) -> None:
        self._check_mergeable(other)
        other.current.add(self.current.get_and_set(self.IDENTITY))

    def get_value(self) -> Union[int, float]:
        return self.current.get()


class LongSumAggregator(_SumAggregator):
    IDENTITY = 0

    def record_long(self, value: int) -> None:
        self.current.add(value)

    def to_point(
        self, start_epoch_nanos: int, epoch_nanos: int, labels: Labels
    ) -> LongPoint:
        return LongPoint(start_epoch_nanos, epoch_nanos, labels, self.current.get())


class DoubleSumAggregator(_SumAggregator):
    IDENTITY = 0.0

    def record_double(self, value: float) -> None:
        self.current.add(value)

    def to_point(
        self, start_epoch_nanos: int, epoch_nanos: int, labels: Labels
    ) -> DoublePoint:
        return DoublePoint(start_epoch_nanos, epoch_nanos, labels, self.current.get())
