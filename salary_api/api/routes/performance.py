from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from salary_api.api.deps import AppServices, get_services


router = APIRouter(tags=["performance"])


@router.get("/performance-metrics", summary="Request counters, cache and timing stats")
def performance_metrics(services: AppServices = Depends(get_services)) -> dict[str, Any]:
    monitor = services.monitor
    return {
        "requests": {
            "total": monitor.requests_total,
            "successful": monitor.requests_successful,
            "failed": monitor.requests_failed,
            "successRate": monitor.success_rate(),
        },
        "cache": services.prediction_cache.stats(),
        "metrics": monitor.all_metrics(),
        "summary": monitor.summary(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/performance-status", summary="Overall latency classification")
def performance_status(services: AppServices = Depends(get_services)) -> dict[str, Any]:
    return {**services.monitor.summary(), "timestamp": datetime.now(timezone.utc).isoformat()}
