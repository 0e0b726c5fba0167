# (c) Copyright IBM Corp. 2025

import threading
from typing import Generator

import pytest

from tracewire.metrics import (
    DoublePoint,
    LongPoint,
    MetricStream,
    double_last_value,
    long_min_max_sum_count,
    long_sum,
)


class TestMetricStream:
    @pytest.fixture(autouse=True)
    def _resources(self) -> Generator[None, None, None]:
        self.stream = MetricStream("http.requests", long_sum)
        yield

    def test_aggregator_per_labels(self) -> None:
        first = self.stream.aggregator({"route": "/", "method": "GET"})
        same = self.stream.aggregator({"method": "GET", "route": "/"})
        other = self.stream.aggregator({"route": "/health"})

        assert first is same
        assert first is not other
        assert self.stream.aggregator() is self.stream.aggregator({})

    def test_collect(self) -> None:
        self.stream.record_long(1, {"route": "/"})
        self.stream.record_long(2, {"route": "/"})
        self.stream.record_long(5, {"route": "/health"})

        points = sorted(self.stream.collect(10, 20), key=lambda p: p.labels["route"])

        assert points == [
            LongPoint(10, 20, {"route": "/"}, 3),
            LongPoint(10, 20, {"route": "/health"}, 5),
        ]

    def test_collect_resets(self) -> None:
        self.stream.record_long(4)
        assert self.stream.collect(1, 2) == [LongPoint(1, 2, {}, 4)]
        self.stream.record_long(0)
        assert self.stream.collect(2, 3) == [LongPoint(2, 3, {}, 0)]

    def test_idle_labels_are_released(self) -> None:
        for i in range(1000):
            self.stream.record_long(1, {"id": str(i)})
        assert len(self.stream.collect(1, 2)) == 1000

        self.stream.record_long(1, {"id": "7"})
        assert self.stream.collect(2, 3) == [LongPoint(2, 3, {"id": "7"}, 1)]
        assert len(self.stream._aggregators) == 1

        assert self.stream.collect(3, 4) == []
        assert self.stream._aggregators == {}

    def test_record_after_release(self) -> None:
        self.stream.record_long(1, {"route": "/"})
        self.stream.collect(1, 2)
        self.stream.collect(2, 3)

        self.stream.record_long(6, {"route": "/"})
        assert self.stream.collect(3, 4) == [LongPoint(3, 4, {"route": "/"}, 6)]

    def test_collect_skips_empty_last_value(self) -> None:
        stream = MetricStream("cpu.temperature", double_last_value)
        stream.record_double(41.5, {"core": "0"})
        stream.aggregator({"core": "1"})

        assert stream.collect(1, 2) == [DoublePoint(1, 2, {"core": "0"}, 41.5)]
        assert stream.collect(2, 3) == []

    def test_summary_stream(self) -> None:
        stream = MetricStream("queue.latency", long_min_max_sum_count)
        for value in [5, 1, 9, 3]:
            stream.record_long(value)

        (point,) = stream.collect(1, 2)
        assert (point.count, point.sum, point.min, point.max) == (4, 18, 1, 9)

    def test_empty_summary_is_skipped(self) -> None:
        stream = MetricStream("queue.latency", long_min_max_sum_count)
        stream.record_long(5)

        assert len(stream.collect(1, 2)) == 1
        assert stream.collect(2, 3) == []

        stream.record_long(7)
        stream.aggregator().copy_and_reset()
        assert stream.collect(3, 4) == []

    def test_concurrent_first_record(self) -> None:
        start = threading.Barrier(8)

        def record() -> None:
            start.wait()
            for _ in range(100):
                self.stream.record_long(1, {"route": "/"})

        threads = [threading.Thread(target=record) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert self.stream.collect(1, 2) == [LongPoint(1, 2, {"route": "/"}, 800)]
