# (c) Copyright IBM Corp. 2025

import threading
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

from tracewire.metrics.aggregator import Aggregator
from tracewire.metrics.point import Point, SummaryPoint

AggregatorFactory = Callable[[], Aggregator]
LabelsKey = Tuple[Tuple[str, str], ...]


def labels_key(labels: Optional[Mapping[str, str]]) -> LabelsKey:
    if not labels:
        return ()
    return tuple(sorted(labels.items()))


def has_samples(point: Optional[Point]) -> bool:
    if point is None:
        return False
    if isinstance(point, SummaryPoint):
        return point.min is not None and point.max is not None
    return True


class MetricStream(object):
    """
    The measurements of one metric, aggregated per set of labels.

    A labels set keeps its aggregator only while it is recorded to: collect()
    releases the aggregators that saw no record since the previous collect().
    Recording threads share the aggregators; collect() is called by a single
    collector.
    """

    def __init__(self, name: str, aggregator_factory: AggregatorFactory) -> None:
        self.name = name
        self.aggregator_factory = aggregator_factory
        self._aggregators: Dict[LabelsKey, Aggregator] = {}
        self._recorded: Set[LabelsKey] = set()
        self._lock = threading.Lock()

    def _aggregator(self, key: LabelsKey) -> Aggregator:
        aggregator = self._aggregators.get(key)
        if aggregator is None:
            aggregator = self.aggregator_factory()
            self._aggregators[key] = aggregator
        return aggregator

    def aggregator(self, labels: Optional[Mapping[str, str]] = None) -> Aggregator:
        """
        Returns the live aggregator of labels.  Records made on it directly do
        not keep it alive past the next collect(); use record_long() and
        record_double() for that.
        """
        with self._lock:
            return self._aggregator(labels_key(labels))

    def record_long(self, value: int, labels: Optional[Mapping[str, str]] = None) -> None:
        key = labels_key(labels)
        with self._lock:
            self._aggregator(key).record_long(value)
            self._recorded.add(key)

    def record_double(
        self, value: float, labels: Optional[Mapping[str, str]] = None
    ) -> None:
        key = labels_key(labels)
        with self._lock:
            self._aggregator(key).record_double(value)
            self._recorded.add(key)

    def collect(self, start_epoch_nanos: int, epoch_nanos: int) -> List[Point]:
        """
        Drains every aggregator recorded to since the last call into a point.
        Points without samples are left out.
        """
        with self._lock:
            recorded, self._recorded = self._recorded, set()
            entries = []
            for key in list(self._aggregators):
                if key in recorded:
                    entries.append((key, self._aggregators[key]))
                else:
                    del self._aggregators[key]

        points = []
        for key, aggregator in entries:
            snapshot = self.aggregator_factory()
            aggregator.merge_to_and_reset(snapshot)
            point = snapshot.to_point(start_epoch_nanos, epoch_nanos, dict(key))
            if has_samples(point):
                points.append(point)
        return points
