from __future__ import annotations

from salary_api.schemas.common import CamelModel


class ModelMetricsOut(CamelModel):
    r2_score: float
    mean_absolute_error: float
    root_mean_square_error: float
    oob_score: float = 0.0


class ModelMetricsResponse(CamelModel):
    linear_regression: ModelMetricsOut
    random_forest: ModelMetricsOut


class ModelStatusResponse(CamelModel):
    is_training: bool
    is_initialized: bool
    model_type: str
    total_records: int
    message: str
