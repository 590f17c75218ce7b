from __future__ import annotations

from datetime import datetime

from salary_api.schemas.common import CamelModel


class DataUploadOut(CamelModel):
    id: int
    filename: str
    record_count: int
    status: str
    uploaded_at: datetime | None = None


class UploadResponse(CamelModel):
    message: str
    upload_id: int
    record_count: int
