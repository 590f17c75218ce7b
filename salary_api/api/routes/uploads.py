from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salary_api.api.deps import AppServices, get_services
from salary_api.config import settings
from salary_api.database import SessionLocal, get_db
from salary_api.error_handlers import FetchError
from salary_api.schemas.data_upload import DataUploadOut, UploadResponse
from salary_api.services import storage
from salary_api.services.upload_service import UploadRejected, count_data_lines, decode_upload, process_upload


logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("/upload-data", response_model=UploadResponse, summary="Upload a salary CSV for retraining")
async def upload_data(
    background_tasks: BackgroundTasks,
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    services: AppServices = Depends(get_services),
) -> UploadResponse:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    raw = await file.read(settings.upload_max_bytes + 1)
    if len(raw) > settings.upload_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.upload_max_bytes} bytes",
        )

    content = decode_upload(raw)
    try:
        record_count = count_data_lines(content)
    except UploadRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    upload = storage.create_data_upload(db, filename=file.filename or "upload.csv", record_count=record_count)
    logger.info("Upload %s accepted: %s (%d rows)", upload.id, upload.filename, record_count)

    background_tasks.add_task(
        process_upload,
        upload.id,
        content,
        session_factory=SessionLocal,
        ensemble=services.ensemble,
        training_source=services.training_source,
        caches=services.derived_caches,
    )
    return UploadResponse(
        message="File uploaded successfully. Processing started.",
        upload_id=upload.id,
        record_count=record_count,
    )


@router.get("/data-uploads", response_model=list[DataUploadOut], summary="Uploads, newest first")
def list_data_uploads(db: Session = Depends(get_db)) -> list[DataUploadOut]:
    try:
        return [DataUploadOut.model_validate(u) for u in storage.list_data_uploads(db)]
    except SQLAlchemyError as exc:
        logger.exception("Failed to list data uploads")
        raise FetchError("data uploads") from exc
