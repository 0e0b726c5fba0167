# (c) Copyright IBM Corp. 2025

from typing import NamedTuple, Optional, Union

from tracewire.metrics.aggregator import Aggregator
from tracewire.metrics.point import Labels, SummaryPoint
from tracewire.util.rwlock import ReadWriteLock

Number = Union[int, float]


class Summary(NamedTuple):
    count: int = 0
    sum: Number = 0
    min: Optional[Number] = None
    max: Optional[Number] = None


def _fold(current: Optional[Number], incoming: Optional[Number], pick) -> Optional[Number]:
    if incoming is None:
        return current
    if current is None:
        return incoming
    return pick(current, incoming)


class _MinMaxSumCountAggregator(Aggregator):
    """
    Tracks count, sum, min and max of the measurements.

    The four fields change together under the write lock; to_point() reads
    them under the read lock.
    """

    IDENTITY_SUM: Number = 0

    def __init__(self) -> None:
        self.lock = ReadWriteLock()
        self._reset()

    def _reset(self) -> None:
        self.count = 0
        self.sum = self.IDENTITY_SUM
        self.min: Optional[Number] = None
        self.max: Optional[Number] = None

    def _record(self, value: Number) -> None:
        with self.lock.write_lock():
            self.count += 1
            self.sum += value
            if self.min is None or value < self.min:
                self.min = value
            if self.max is None or value > self.max:
                self.max = value

    def copy_and_reset(self) -> Summary:
        with self.lock.write_lock():
            summary = Summary(self.count, self.sum, self.min, self.max)
            self._reset()
        return summary

    def update(self, summary: Summary) -> None:
        with self.lock.write_lock():
            self.count += summary.count
            self.sum += summary.sum
            self.min = _fold(self.min, summary.min, min)
            self.max = _fold(self.max, summary.max, max)

    def merge_to_and_reset(self, other: Aggregator) -> None:
        self._check_mergeable(other)
        other.update(self.copy_and_reset())

    def to_point(
        self, start_epoch_nanos: int, epoch_nanos: int, labels: Labels
    ) -> SummaryPoint:
        with self.lock.read_lock():
            return SummaryPoint(
                start_epoch_nanos,
                epoch_nanos,
                labels,
                self.count,
                self.sum,
                self.min,
                self.max,
            )


class LongMinMaxSumCountAggregator(_MinMaxSumCountAggregator):
    IDENTITY_SUM = 0

    def record_long(self, value: int) -> None:
        self._record(value)


class DoubleMinMaxSumCountAggregator(_MinMaxSumCountAggregator):
    IDENTITY_SUM = 0.0

    def record_double(self, value: float) -> None:
        self._record(value)
