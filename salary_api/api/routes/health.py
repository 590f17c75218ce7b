import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from salary_api.api.deps import AppServices, get_services
from salary_api.config import settings
from salary_api.database import engine


router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    service: str
    response_time: float
    cache_size: int
    requests_processed: int
    success_rate: str
    timestamp: datetime
    message: str


class DBHealthStatus(BaseModel):
    status: str
    orm: str
    timestamp: datetime


@router.get("", response_model=HealthStatus, summary="API heartbeat")
def health_check(services: AppServices = Depends(get_services)) -> HealthStatus:
    started = time.perf_counter()
    monitor = services.monitor
    return HealthStatus(
        status="healthy",
        service=settings.service_name,
        response_time=round((time.perf_counter() - started) * 1000, 3),
        cache_size=len(services.prediction_cache),
        requests_processed=monitor.requests_total,
        success_rate=monitor.success_rate(),
        timestamp=datetime.now(timezone.utc),
        message=f"{services.predictor.ensemble.status()['model_type']} predictions ready",
    )


@router.get("/db", response_model=DBHealthStatus, summary="DB connectivity check")
def db_health_check() -> DBHealthStatus:
    orm_status = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        orm_status = "error"

    return DBHealthStatus(
        status="healthy" if orm_status == "ok" else "degraded",
        orm=orm_status,
        timestamp=datetime.now(timezone.utc),
    )
