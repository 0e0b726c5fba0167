# (c) Copyright IBM Corp. 2025

from typing import Dict, NamedTuple, Optional, Union

Labels = Dict[str, str]


class LongPoint(NamedTuple):
    start_epoch_nanos: int
    epoch_nanos: int
    labels: Labels
    value: int


class DoublePoint(NamedTuple):
    start_epoch_nanos: int
    epoch_nanos: int
    labels: Labels
    value: float


class SummaryPoint(NamedTuple):
    """
    Count and sum of the measurements in the interval together with their
    bounds.  min and max are None when nothing was recorded.
    """

    start_epoch_nanos: int
    epoch_nanos: int
    labels: Labels
    count: int
    sum: Union[int, float]
    min: Optional[Union[int, float]]
    max: Optional[Union[int, float]]


Point = Union[LongPoint, DoublePoint, SummaryPoint]
