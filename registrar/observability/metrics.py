"""Enrollment metrics collector. Thread-safe, in-memory. No real Prometheus dependency."""

import threading
from typing import Any


class EnrollmentMetrics:
    """
    In-memory Prometheus-style registry for enrollment operations.
    Counters keyed by operation and outcome ("success" or an error kind),
    plus conflict retries and a latency histogram per operation.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcomes: dict[str, dict[str, int]] = {}
        self._conflict_retries: dict[str, int] = {}
        self._latency_ms: dict[str, list[float]] = {}

    def record_outcome(self, operation: str, outcome: str) -> None:
        with self._lock:
            by_outcome = self._outcomes.setdefault(operation, {})
            by_outcome[outcome] = by_outcome.get(outcome, 0) + 1

    def record_conflict_retry(self, operation: str) -> None:
        with self._lock:
            self._conflict_retries[operation] = self._conflict_retries.get(operation, 0) + 1

    def observe_latency(self, operation: str, latency_ms: float) -> None:
        with self._lock:
            self._latency_ms.setdefault(operation, []).append(latency_ms)

    def count(self, operation: str, outcome: str) -> int:
        with self._lock:
            return self._outcomes.get(operation, {}).get(outcome, 0)

    def export(self) -> dict[str, Any]:
        """Export all metrics as a plain dict."""
        with self._lock:
            return {
                "outcomes": {op: dict(v) for op, v in self._outcomes.items()},
                "conflict_retries": dict(self._conflict_retries),
                "latency_ms": {
                    op: {"count": len(v), "sum": sum(v), "max": max(v)}
                    for op, v in self._latency_ms.items()
                    if v
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._outcomes.clear()
            self._conflict_retries.clear()
            self._latency_ms.clear()
