"""
Process-lifetime outcome counters and uptime.
"""
import threading
import time

import psutil

from tokfetch.metadata import METHOD_FALLBACK, METHOD_PRIMARY


class StatsRegistry:
    """
    Counts completed download requests by outcome. Every increment happens
    under a lock so concurrent requests never lose an update.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._successes = {METHOD_PRIMARY: 0, METHOD_FALLBACK: 0}
        self._failures = 0
        self.started_at = psutil.Process().create_time()

    def record_success(self, method):
        with self._lock:
            if method not in self._successes:
                raise ValueError(f"Unknown extraction method: {method}")
            self._successes[method] += 1

    def record_failure(self):
        with self._lock:
            self._failures += 1

    def snapshot(self):
        """Returns a read-only copy of the counters."""
        with self._lock:
            return {
                'primarySuccesses': self._successes[METHOD_PRIMARY],
                'fallbackSuccesses': self._successes[METHOD_FALLBACK],
                'totalFailures': self._failures,
            }

    def uptime_seconds(self):
        return max(0.0, time.time() - self.started_at)
