from __future__ import annotations

import logging
from typing import Callable, Iterable

from sqlalchemy.orm import Session

from salary_api.models.data_upload import UPLOAD_STATUS_FAILED, UPLOAD_STATUS_PROCESSED
from salary_api.services import storage
from salary_api.services.cache import TTLCache
from salary_api.services.datasets import TrainingRecord, parse_csv
from salary_api.services.ensemble import EnsembleRegistry
from salary_api.services.training_data import TrainingDataSource


logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


def decode_upload(raw: bytes) -> str:
    # Excel exports often prepend a BOM.
    return raw.decode("utf-8-sig", errors="replace")


def count_data_lines(content: str) -> int:
    """Non-blank lines minus the header row."""
    lines = [line for line in content.splitlines() if line.strip()]
    if len(lines) < 2:
        raise UploadRejected("CSV file must have a header and at least one data row")
    return len(lines) - 1


def _employee_row(record: TrainingRecord) -> dict:
    return {
        "job_title": record.job_title[:255],
        "experience": int(round(record.experience)),
        "department": record.department[:100],
        "location": record.location[:100],
        "education_level": record.education_level[:100],
        "company_size": record.company_size[:100],
        "actual_salary": record.salary,
    }


def process_upload(
    upload_id: int,
    content: str,
    *,
    session_factory: Callable[[], Session],
    ensemble: EnsembleRegistry,
    training_source: TrainingDataSource,
    caches: Iterable[TTLCache] = (),
) -> str:
    """Background step after an upload is accepted. Never raises; returns the
    final upload status."""
    status = UPLOAD_STATUS_FAILED
    try:
        records = parse_csv(content)
        if not records:
            logger.warning("Upload %s has no valid records", upload_id)
        else:
            ensemble.retrain(training_source.collect() + records)
            with session_factory() as db:
                added = storage.bulk_create_employees(db, [_employee_row(r) for r in records])
            for cache in caches:
                cache.clear()
            status = UPLOAD_STATUS_PROCESSED
            logger.info("Upload %s processed: %d employees added", upload_id, added)
    except Exception:
        logger.exception("Processing upload %s failed", upload_id)
        status = UPLOAD_STATUS_FAILED

    try:
        with session_factory() as db:
            storage.update_data_upload_status(db, upload_id, status)
    except Exception:
        logger.exception("Could not record status %r for upload %s", status, upload_id)
    return status
