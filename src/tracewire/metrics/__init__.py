# (c) Copyright IBM Corp. 2025

"""
Metric aggregation: thread-safe aggregators, per-label streams and a
periodic collector.

The factory functions below are the AggregatorFactory callables handed to a
MetricStream.  Each call returns a new aggregator.
"""

from tracewire.metrics.aggregator import Aggregator
from tracewire.metrics.collector import MetricCollector
from tracewire.metrics.last_value import (
    DoubleLastValueAggregator,
    LongLastValueAggregator,
)
from tracewire.metrics.point import DoublePoint, LongPoint, SummaryPoint
from tracewire.metrics.stream import MetricStream
from tracewire.metrics.sum import DoubleSumAggregator, LongSumAggregator
from tracewire.metrics.summary import (
    DoubleMinMaxSumCountAggregator,
    LongMinMaxSumCountAggregator,
    Summary,
)


def long_sum() -> LongSumAggregator:
    return LongSumAggregator()


def double_sum() -> DoubleSumAggregator:
    return DoubleSumAggregator()


def long_last_value() -> LongLastValueAggregator:
    return LongLastValueAggregator()


def double_last_value() -> DoubleLastValueAggregator:
    return DoubleLastValueAggregator()


def long_min_max_sum_count() -> LongMinMaxSumCountAggregator:
    return LongMinMaxSumCountAggregator()


def double_min_max_sum_count() -> DoubleMinMaxSumCountAggregator:
    return DoubleMinMaxSumCountAggregator()


__all__ = [
    "Aggregator",
    "DoubleLastValueAggregator",
    "DoubleMinMaxSumCountAggregator",
    "DoublePoint",
    "DoubleSumAggregator",
    "LongLastValueAggregator",
    "LongMinMaxSumCountAggregator",
    "LongPoint",
    "LongSumAggregator",
    "MetricCollector",
    "MetricStream",
    "Summary",
    "SummaryPoint",
    "double_last_value",
    "double_min_max_sum_count",
    "double_sum",
    "long_last_value",
    "long_min_max_sum_count",
    "long_sum",
]
