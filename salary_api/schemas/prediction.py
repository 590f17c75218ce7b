from __future__ import annotations

from datetime import datetime

from salary_api.schemas.common import CamelModel
from salary_api.schemas.employee import JobAttributes


class PredictionRequest(JobAttributes):
    pass


class PredictionOut(CamelModel):
    id: int
    job_title: str
    experience: int
    department: str
    location: str
    education_level: str
    company_size: str
    linear_regression_prediction: float | None = None
    random_forest_prediction: float | None = None
    confidence: float | None = None
    created_at: datetime | None = None


class PredictResponse(CamelModel):
    prediction: PredictionOut
    feature_importance: dict[str, float]
    response_time: float
    cached: bool = False
    engine: str
    service: str
    fallback: bool = False
    message: str | None = None


class PredictionWithImportance(CamelModel):
    prediction: PredictionOut
    feature_importance: dict[str, float]
