from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any


logger = logging.getLogger(__name__)

MAX_SAMPLES = 100


def classify_response_time(avg_ms: float) -> str:
    if avg_ms < 50:
        return "excellent"
    if avg_ms < 100:
        return "good"
    if avg_ms < 200:
        return "moderate"
    return "slow"


def format_rate(successes: int, total: int) -> str:
    if total <= 0:
        return "100%"
    return f"{successes / total * 100:.1f}%"


class PerformanceMonitor:
    """Rolling timing samples per metric name plus request counters."""

    def __init__(self, max_samples: int = MAX_SAMPLES) -> None:
        self._max_samples = max_samples
        self._metrics: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self.requests_total = 0
        self.requests_successful = 0
        self.requests_failed = 0

    def record_metric(self, name: str, value: float) -> None:
        with self._lock:
            samples = self._metrics.setdefault(name, deque(maxlen=self._max_samples))
            samples.append(float(value))

    def record_request(self, *, success: bool) -> None:
        with self._lock:
            self.requests_total += 1
            if success:
                self.requests_successful += 1
            else:
                self.requests_failed += 1

    def stats(self, name: str) -> dict[str, float]:
        with self._lock:
            samples = list(self._metrics.get(name, ()))
        if not samples:
            return {"avg": 0, "min": 0, "max": 0, "count": 0}
        return {
            "avg": round(sum(samples) / len(samples)),
            "min": min(samples),
            "max": max(samples),
            "count": len(samples),
        }

    def all_metrics(self) -> dict[str, dict[str, float]]:
        with self._lock:
            names = list(self._metrics)
        return {name: self.stats(name) for name in names}

    def success_rate(self) -> str:
        return format_rate(self.requests_successful, self.requests_total)

    def summary(self) -> dict[str, Any]:
        total = self.stats("prediction_total")
        cache_hits = self.stats("prediction_cache_hit")
        requests = total["count"] + cache_hits["count"]
        hit_rate = (cache_hits["count"] / requests * 100) if requests else 0.0
        avg = total["avg"] or 0
        return {
            "status": classify_response_time(avg),
            "avgResponseTime": avg,
            "cacheHitRate": round(hit_rate),
        }

    def log_report(self) -> None:
        metrics = self.all_metrics()
        if not metrics:
            return
        logger.info("Performance report")
        if "prediction_total" in metrics:
            avg = metrics["prediction_total"]["avg"]
            logger.info("Prediction performance: %s (avg: %sms)", classify_response_time(avg).upper(), avg)
        for name, s in metrics.items():
            logger.info("%s: avg=%sms, min=%sms, max=%sms (%s samples)", name, s["avg"], s["min"], s["max"], s["count"])
