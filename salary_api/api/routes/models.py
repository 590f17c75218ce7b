from fastapi import APIRouter, Depends

from salary_api.api.deps import AppServices, get_services
from salary_api.schemas.model_info import ModelMetricsOut, ModelMetricsResponse, ModelStatusResponse


router = APIRouter(tags=["models"])


@router.get("/model-metrics", response_model=ModelMetricsResponse, summary="Evaluation metrics per model")
def model_metrics(services: AppServices = Depends(get_services)) -> ModelMetricsResponse:
    metrics = services.ensemble.metrics()
    return ModelMetricsResponse(
        linear_regression=ModelMetricsOut.model_validate(metrics["linear_regression"]),
        random_forest=ModelMetricsOut.model_validate(metrics["random_forest"]),
    )


@router.get("/model-status", response_model=ModelStatusResponse, summary="Training state of the ensemble")
def model_status(services: AppServices = Depends(get_services)) -> ModelStatusResponse:
    return ModelStatusResponse(**services.ensemble.status())
