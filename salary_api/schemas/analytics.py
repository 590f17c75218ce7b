from __future__ import annotations

from salary_api.schemas.common import CamelModel


class StatsResponse(CamelModel):
    total_employees: int
    avg_salary: int
    model_accuracy: float
    service: str
