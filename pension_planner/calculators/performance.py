"""Timing wrapper for expensive calculations.

A :class:`PerformanceMonitor` is owned by the caller and passed into the
optimizer.  Operations slower than one second are logged as warnings and
those slower than two seconds as errors.  Only the latest 100 measurements
are kept.

Example
-------

>>> monitor = PerformanceMonitor()
>>> with monitor.measure("projection"):
...     pass
>>> monitor.metrics[0].name
'projection'
"""

from __future__ import annotations

import logging
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

WARNING_THRESHOLD_MS = 1000.0
ERROR_THRESHOLD_MS = 2000.0
MAX_METRICS = 100


@dataclass(frozen=True)
class PerformanceMetric:
    name: str
    duration_ms: float
    started_at: float
    metadata: Dict[str, object] = field(default_factory=dict)


class PerformanceMonitor:
    def __init__(
        self,
        warning_ms: float = WARNING_THRESHOLD_MS,
        error_ms: float = ERROR_THRESHOLD_MS,
        max_metrics: int = MAX_METRICS,
    ) -> None:
        self.warning_ms = warning_ms
        self.error_ms = error_ms
        self._metrics: Deque[PerformanceMetric] = deque(maxlen=max_metrics)

    @contextmanager
    def measure(self, name: str, **metadata: object) -> Iterator[None]:
        started = time.time()
        t0 = time.perf_counter()
        try:
            yield
        finally:
            duration = (time.perf_counter() - t0) * 1000.0
            self.record(PerformanceMetric(name, duration, started, dict(metadata)))

    def record(self, metric: PerformanceMetric) -> None:
        self._metrics.append(metric)
        if metric.duration_ms > self.error_ms:
            logger.error("%s took %.1f ms (limit %.0f ms)", metric.name, metric.duration_ms, self.error_ms)
        elif metric.duration_ms > self.warning_ms:
            logger.warning("%s took %.1f ms", metric.name, metric.duration_ms)
        else:
            logger.debug("%s took %.1f ms", metric.name, metric.duration_ms)

    @property
    def metrics(self) -> List[PerformanceMetric]:
        return list(self._metrics)

    def average_duration(self, name: str) -> Optional[float]:
        durations = [m.duration_ms for m in self._metrics if m.name == name]
        if not durations:
            return None
        return sum(durations) / len(durations)

    def slow_operations(self) -> List[PerformanceMetric]:
        return [m for m in self._metrics if m.duration_ms > self.warning_ms]

    def clear(self) -> None:
        self._metrics.clear()


__all__ = ["PerformanceMetric", "PerformanceMonitor", "WARNING_THRESHOLD_MS", "ERROR_THRESHOLD_MS"]
