from __future__ import annotations

import asyncio
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salary_api.api.deps import AppServices, get_services
from salary_api.config import settings
from salary_api.database import get_db
from salary_api.error_handlers import FetchError
from salary_api.schemas.prediction import PredictionOut, PredictionRequest, PredictionWithImportance, PredictResponse
from salary_api.services import storage
from salary_api.services.salary_predictor import DEFAULT_FEATURE_IMPORTANCE, SalaryInput, emergency_prediction


logger = logging.getLogger(__name__)

router = APIRouter(tags=["predictions"])

EMERGENCY_ENGINE = "emergency"


@router.post("/predict", response_model=PredictResponse, response_model_exclude_none=True, summary="Predict a salary")
async def predict_salary(
    payload: PredictionRequest,
    db: Session = Depends(get_db),
    services: AppServices = Depends(get_services),
) -> PredictResponse:
    started = time.perf_counter()
    data = SalaryInput.from_mapping(payload.model_dump())
    fallback = False

    try:
        # Abandoned on timeout; the worker thread runs to completion.
        loop = asyncio.get_running_loop()
        result, cached, engine = await asyncio.wait_for(
            loop.run_in_executor(None, services.predictor.predict, data),
            timeout=settings.predict_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        services.monitor.record_request(success=False)
        logger.warning("Prediction timed out after %ss", settings.predict_timeout_seconds)
        raise HTTPException(
            status_code=status.HTTP_408_REQUEST_TIMEOUT,
            detail="Prediction timeout - please try again",
        ) from exc
    except Exception:
        logger.exception("Prediction failed; serving emergency estimate")
        result, cached, engine = emergency_prediction(data.experience), False, EMERGENCY_ENGINE
        fallback = True

    record = await run_in_threadpool(storage.create_prediction, db, data, result)
    services.monitor.record_request(success=not fallback)

    return PredictResponse(
        prediction=PredictionOut.model_validate(record),
        feature_importance=result.feature_importance,
        response_time=round((time.perf_counter() - started) * 1000, 3),
        cached=cached,
        engine=engine,
        service=settings.service_name,
        fallback=fallback,
        message="Emergency prediction - service temporarily degraded" if fallback else None,
    )


@router.get("/predictions", response_model=list[PredictionWithImportance], summary="Recent predictions, newest first")
def list_recent_predictions(
    limit: int = Query(default=storage.DEFAULT_PREDICTION_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
) -> list[PredictionWithImportance]:
    try:
        rows = storage.list_predictions(db, limit)
    except SQLAlchemyError as exc:
        logger.exception("Failed to list predictions")
        raise FetchError("predictions") from exc
    # Per-prediction importances are not persisted; the nominal weights are reported.
    return [
        PredictionWithImportance(
            prediction=PredictionOut.model_validate(row),
            feature_importance=dict(DEFAULT_FEATURE_IMPORTANCE),
        )
        for row in rows
    ]
