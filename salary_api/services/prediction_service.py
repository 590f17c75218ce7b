from __future__ import annotations

import logging
import threading
import time

from salary_api.services.cache import TTLCache, make_cache_key
from salary_api.services.ensemble import EnsembleRegistry, ModelNotReadyError
from salary_api.services.performance_monitor import PerformanceMonitor
from salary_api.services.salary_predictor import PredictionResult, RuleBasedPredictor, SalaryInput


logger = logging.getLogger(__name__)


class SalaryPredictionService:
    """Cache in front of the ensemble, with the rule tables as the fallback
    while the ensemble is not trained."""

    def __init__(
        self,
        cache: TTLCache,
        ensemble: EnsembleRegistry,
        monitor: PerformanceMonitor,
        *,
        rule_based: RuleBasedPredictor | None = None,
        lazy_initialization: bool = True,
    ) -> None:
        self.cache = cache
        self.ensemble = ensemble
        self.monitor = monitor
        self.rule_based = rule_based or RuleBasedPredictor()
        self.lazy_initialization = lazy_initialization
        self._init_thread: threading.Thread | None = None
        self._init_lock = threading.Lock()

    def _request_initialization(self) -> None:
        if not self.lazy_initialization or self.ensemble.is_trained or self.ensemble.is_training:
            return
        with self._init_lock:
            if self._init_thread is not None and self._init_thread.is_alive():
                return
            logger.info("Ensemble not trained; starting background initialization")
            self._init_thread = threading.Thread(
                target=self.ensemble.initialize, name="ensemble-init", daemon=True
            )
            self._init_thread.start()

    def predict(self, data: SalaryInput) -> tuple[PredictionResult, bool, str]:
        """Returns ``(result, cached, engine)``."""
        started = time.perf_counter()
        normalized = data.normalized()
        key = make_cache_key(normalized.as_dict())

        hit = self.cache.get(key)
        if hit is not None:
            result, engine = hit
            self.monitor.record_metric("prediction_cache_hit", (time.perf_counter() - started) * 1000)
            return result, True, engine

        result: PredictionResult | None = None
        engine = self.rule_based.name
        if self.ensemble.is_trained:
            try:
                result = self.ensemble.predict(normalized)
                engine = self.ensemble.name
            except ModelNotReadyError:
                result = None
        else:
            self._request_initialization()

        if result is None:
            result = self.rule_based.predict(normalized)
            engine = self.rule_based.name

        self.cache.set(key, (result, engine))
        self.monitor.record_metric("prediction_total", (time.perf_counter() - started) * 1000)
        return result, False, engine
