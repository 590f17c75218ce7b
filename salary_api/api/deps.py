# deps.py
from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from salary_api.services.cache import TTLCache
from salary_api.services.ensemble import EnsembleRegistry
from salary_api.services.performance_monitor import PerformanceMonitor
from salary_api.services.prediction_service import SalaryPredictionService
from salary_api.services.training_data import TrainingDataSource


@dataclass
class AppServices:
    """Process-wide singletons built in the lifespan and kept on app.state."""

    monitor: PerformanceMonitor
    prediction_cache: TTLCache
    analytics_cache: TTLCache
    stats_cache: TTLCache
    ensemble: EnsembleRegistry
    training_source: TrainingDataSource
    predictor: SalaryPredictionService

    @property
    def derived_caches(self) -> tuple[TTLCache, ...]:
        # Everything computed from the employees table.
        return (self.analytics_cache, self.stats_cache)


def get_services(request: Request) -> AppServices:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service is starting up")
    return services
