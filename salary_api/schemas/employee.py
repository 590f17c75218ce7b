from __future__ import annotations

from datetime import datetime

from pydantic import Field

from salary_api.schemas.common import CamelModel


class JobAttributes(CamelModel):
    job_title: str = Field(..., min_length=1, max_length=255)
    experience: int = Field(..., ge=0, le=60)
    department: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=100)
    education_level: str = Field(..., min_length=1, max_length=100)
    company_size: str = Field(..., min_length=1, max_length=100)


class EmployeeCreate(JobAttributes):
    actual_salary: float | None = Field(default=None, ge=0)


class EmployeeOut(CamelModel):
    """Stored rows are reported as-is; input bounds do not apply."""

    id: int
    job_title: str
    experience: int
    department: str
    location: str
    education_level: str
    company_size: str
    actual_salary: float | None = None
    created_at: datetime | None = None
