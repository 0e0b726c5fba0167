# (c) Copyright IBM Corp. 2025

"""
Aggregators combine the measurements of one metric stream into a single value
over a collection interval.

Many threads may record into an aggregator at once; exactly one collector
drains it with merge_to_and_reset(), which moves the current value into
another aggregator and resets this one to its identity value.
"""

from typing import Optional

from tracewire.exceptions import UnsupportedOperationError
from tracewire.metrics.point import Labels, Point


class Aggregator(object):
    def record_long(self, value: int) -> None:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not record long values"
        )

    def record_double(self, value: float) -> None:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not record double values"
        )

    def merge_to_and_reset(self, other: "Aggregator") -> None:
        """Moves the current value into other and resets this aggregator."""
        raise NotImplementedError

    def to_point(
        self, start_epoch_nanos: int, epoch_nanos: int, labels: Labels
    ) -> Optional[Point]:
        raise NotImplementedError

    def _check_mergeable(self, other: "Aggregator") -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot merge {type(self).__name__} into {type(other).__name__}"
            )
