# (c) Copyright IBM Corp. 2025

import random
import threading

import pytest

from tracewire.exceptions import UnsupportedOperationError
from tracewire.metrics import (
    Summary,
    SummaryPoint,
    double_min_max_sum_count,
    long_min_max_sum_count,
    long_sum,
)

LABELS = {"queue": "jobs"}


class TestMinMaxSumCountAggregator:
    def test_record(self) -> None:
        aggregator = long_min_max_sum_count()
        for value in [5, 1, 9, 3]:
            aggregator.record_long(value)

        assert aggregator.to_point(1, 2, LABELS) == SummaryPoint(
            1, 2, LABELS, count=4, sum=18, min=1, max=9
        )

    def test_first_value_seeds_min_and_max(self) -> None:
        aggregator = long_min_max_sum_count()
        aggregator.record_long(42)
        point = aggregator.to_point(1, 2, LABELS)
        assert (point.min, point.max) == (42, 42)

    def test_concurrent_record(self) -> None:
        aggregator = long_min_max_sum_count()
        values = [5, 1, 9, 3] * 250
        random.shuffle(values)
        chunks = [values[i::4] for i in range(4)]

        def record(chunk) -> None:
            for value in chunk:
                aggregator.record_long(value)

        threads = [threading.Thread(target=record, args=(c,)) for c in chunks]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert aggregator.copy_and_reset() == Summary(1000, 4500, 1, 9)

    def test_copy_and_reset(self) -> None:
        aggregator = long_min_max_sum_count()
        for value in [5, 1, 9, 3]:
            aggregator.record_long(value)

        assert aggregator.copy_and_reset() == Summary(4, 18, 1, 9)

        point = aggregator.to_point(1, 2, LABELS)
        assert point.count == 0
        assert point.sum == 0
        assert point.min is None
        assert point.max is None

    def test_update(self) -> None:
        aggregator = long_min_max_sum_count()
        aggregator.record_long(4)

        aggregator.update(Summary(2, 11, 1, 10))
        assert aggregator.copy_and_reset() == Summary(3, 15, 1, 10)

    def test_update_ignores_missing_bounds(self) -> None:
        aggregator = long_min_max_sum_count()
        aggregator.record_long(4)
        aggregator.update(Summary())
        assert aggregator.copy_and_reset() == Summary(1, 4, 4, 4)

    def test_update_of_empty_aggregator(self) -> None:
        aggregator = long_min_max_sum_count()
        aggregator.update(Summary(1, 7, 7, 7))
        assert aggregator.copy_and_reset() == Summary(1, 7, 7, 7)

    def test_merge_to_and_reset(self) -> None:
        aggregator = long_min_max_sum_count()
        target = long_min_max_sum_count()
        target.record_long(20)
        for value in [5, 1, 9]:
            aggregator.record_long(value)

        aggregator.merge_to_and_reset(target)

        assert target.copy_and_reset() == Summary(4, 35, 1, 20)
        assert aggregator.copy_and_reset() == Summary(0, 0, None, None)

    def test_merge_into_other_kind(self) -> None:
        with pytest.raises(TypeError):
            long_min_max_sum_count().merge_to_and_reset(long_sum())
        with pytest.raises(TypeError):
            long_min_max_sum_count().merge_to_and_reset(double_min_max_sum_count())

    def test_double(self) -> None:
        aggregator = double_min_max_sum_count()
        aggregator.record_double(0.5)
        aggregator.record_double(-1.5)

        point = aggregator.to_point(1, 2, LABELS)
        assert (point.count, point.sum, point.min, point.max) == (2, -1.0, -1.5, 0.5)
        assert aggregator.copy_and_reset().sum == -1.0
        assert aggregator.to_point(1, 2, LABELS).sum == 0.0

    def test_wrong_record_type(self) -> None:
        with pytest.raises(UnsupportedOperationError):
            long_min_max_sum_count().record_double(1.0)
        with pytest.raises(UnsupportedOperationError):
            double_min_max_sum_count().record_long(1)
