# (c) Copyright IBM Corp. 2025

import threading
import time
from typing import Callable, Dict, List, Optional

from tracewire.log import logger
from tracewire.metrics.point import Point
from tracewire.metrics.stream import MetricStream

CollectCallback = Callable[[Dict[str, List[Point]]], None]


def _now_nanos() -> int:
    return time.time_ns()


class TimerWrapper(object):
    def __init__(self) -> None:
        self.timer: Optional[threading.Timer] = None
        self.cancel_lock = threading.Lock()
        self.canceled = False

    def cancel(self) -> None:
        with self.cancel_lock:
            self.canceled = True
            if self.timer:
                self.timer.cancel()


def schedule(timeout: float, interval: float, func: Callable, *args) -> TimerWrapper:
    """
    Runs func after timeout and then every interval seconds until the
    returned wrapper is canceled.  Errors are logged and the schedule goes on.
    """
    tw = TimerWrapper()

    def func_wrapper() -> None:
        start = time.time()

        try:
            func(*args)
        except Exception:
            logger.error("Error in scheduled function", exc_info=True)

        with tw.cancel_lock:
            if not tw.canceled:
                tw.timer = threading.Timer(
                    abs(interval - (time.time() - start)), func_wrapper, ()
                )
                tw.timer.daemon = True
                tw.timer.start()

    tw.timer = threading.Timer(timeout, func_wrapper, ())
    tw.timer.daemon = True
    tw.timer.start()

    return tw


class MetricCollector(object):
    """Periodically drains the registered metric streams."""

    def __init__(
        self, interval: float = 60.0, callback: Optional[CollectCallback] = None
    ) -> None:
        self.interval = interval
        self.callback = callback
        self.streams: Dict[str, MetricStream] = {}
        self.last_collect_nanos = _now_nanos()
        self._timer: Optional[TimerWrapper] = None
        self._lock = threading.Lock()

    def register(self, stream: MetricStream) -> MetricStream:
        with self._lock:
            if stream.name in self.streams:
                raise ValueError(f"Metric stream already registered: {stream.name}")
            self.streams[stream.name] = stream
        return stream

    def unregister(self, name: str) -> None:
        with self._lock:
            self.streams.pop(name, None)

    def collect(self) -> Dict[str, List[Point]]:
        """
        Drains every stream into points covering the time since the last
        collection.

        :return: points by stream name
        """
        with self._lock:
            streams = list(self.streams.values())
            start = self.last_collect_nanos
            end = _now_nanos()
            self.last_collect_nanos = end

        return {stream.name: stream.collect(start, end) for stream in streams}

    def _run(self) -> None:
        result = self.collect()
        logger.debug(f"Collected {sum(len(p) for p in result.values())} metric points")
        if self.callback is not None:
            self.callback(result)

    def start(self) -> None:
        if self._timer is not None:
            logger.debug("MetricCollector already started")
            return
        self._timer = schedule(self.interval, self.interval, self._run)

    def stop(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None

    @property
    def running(self) -> bool:
        return self._timer is not None
