# trigeval/core/stats.py

"""
Rolling evaluation statistics: counters, EMA latency and cache hit rate.
"""

import time
from typing import Any, Callable, Dict

DEFAULT_SMOOTHING = 0.1
DEFAULT_IDLE_WINDOW_S = 10.0


class StatsCollector:
    """
    Aggregates per-call outcomes for one evaluator.

    The hit rate is an exact ratio of cache hits to total calls (failed calls
    count in the denominator). Latency is an exponential moving average in
    milliseconds, seeded at 0 like the counters.
    """

    def __init__(self, smoothing: float = DEFAULT_SMOOTHING,
                 idle_window_s: float = DEFAULT_IDLE_WINDOW_S,
                 clock: Callable[[], float] = time.time):
        self.smoothing = smoothing
        self.idle_window_s = idle_window_s
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        """Zeroes every counter and timestamp."""
        self.total_evaluations = 0
        self.successful_evaluations = 0
        self.failed_evaluations = 0
        self.cache_hits = 0
        self.average_evaluation_time = 0.0
        self.first_evaluation_time = 0.0
        self.last_evaluation_time = 0.0

    def record(self, elapsed_ms: float, success: bool, cache_hit: bool = False) -> None:
        """Folds one call into the statistics."""
        now = self._clock()
        if self.total_evaluations == 0:
            self.first_evaluation_time = now
        self.total_evaluations += 1
        if success:
            self.successful_evaluations += 1
        else:
            self.failed_evaluations += 1
        if cache_hit:
            self.cache_hits += 1

        alpha = self.smoothing
        self.average_evaluation_time = self.average_evaluation_time * (1 - alpha) + elapsed_ms * alpha
        self.last_evaluation_time = now

    @property
    def cache_hit_rate(self) -> float:
        if self.total_evaluations == 0:
            return 0.0
        return self.cache_hits / self.total_evaluations * 100

    @property
    def success_rate(self) -> float:
        if self.total_evaluations == 0:
            return 0.0
        return self.successful_evaluations / self.total_evaluations * 100

    @property
    def failure_rate(self) -> float:
        if self.total_evaluations == 0:
            return 0.0
        return 100 - self.success_rate

    def evaluations_per_second(self) -> float:
        """Mean call rate since the first call; 0 once idle past the window."""
        if self.total_evaluations == 0:
            return 0.0
        now = self._clock()
        if now - self.last_evaluation_time > self.idle_window_s:
            return 0.0
        elapsed = now - self.first_evaluation_time
        if elapsed <= 0:
            return 0.0
        return self.total_evaluations / elapsed

    def snapshot(self) -> Dict[str, Any]:
        return {
            "total_evaluations": self.total_evaluations,
            "successful_evaluations": self.successful_evaluations,
            "failed_evaluations": self.failed_evaluations,
            "average_evaluation_time": self.average_evaluation_time,
            "cache_hit_rate": self.cache_hit_rate,
            "last_evaluation_time": self.last_evaluation_time,
            "success_rate": self.success_rate,
            "failure_rate": self.failure_rate,
            "evaluations_per_second": self.evaluations_per_second(),
        }
