"""Conversion counters and stage timings, kept in process.

The re-encoder bumps ``reencode.succeeded`` / ``reencode.failed.<kind>`` and
times the ``reencode.decode`` and ``reencode.encode`` stages. Tests reset the
shared ``metrics`` object between cases.
"""

from __future__ import annotations

import time
from collections import Counter, defaultdict
from contextlib import contextmanager
from threading import RLock
from typing import Any


class ConversionMetrics:
    def __init__(self) -> None:
        self._lock = RLock()
        self._counters: Counter[str] = Counter()
        self._timings: defaultdict[str, list[float]] = defaultdict(list)

    def inc(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[key] += int(amount)

    def count(self, key: str) -> int:
        with self._lock:
            return self._counters[key]

    @contextmanager
    def timed(self, key: str):
        """Record the wall time of the ``with`` body, also when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(key, time.perf_counter() - start)

    def record(self, key: str, seconds: float) -> None:
        with self._lock:
            self._timings[key].append(seconds)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counters),
                "timings": {key: samples[:] for key, samples in self._timings.items()},
            }

    def reset(self) -> None:
        with self._lock:
            self._counters = Counter()
            self._timings = defaultdict(list)


metrics = ConversionMetrics()
