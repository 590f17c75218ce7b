from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from salary_api.database import Base


UPLOAD_STATUS_PROCESSING = "processing"
UPLOAD_STATUS_PROCESSED = "processed"
UPLOAD_STATUS_FAILED = "failed"

UPLOAD_STATUSES = (UPLOAD_STATUS_PROCESSING, UPLOAD_STATUS_PROCESSED, UPLOAD_STATUS_FAILED)


class DataUpload(Base):
    __tablename__ = "data_uploads"

    id = Column(Integer, primary_key=True, index=True)
    filename = Column(String(255), nullable=False)
    record_count = Column(Integer, nullable=False)
    # 'processing' | 'processed' | 'failed'
    status = Column(String(32), nullable=False, default=UPLOAD_STATUS_PROCESSING)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
