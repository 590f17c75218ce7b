from __future__ import annotations

from salary_api.schemas.common import CamelModel


class OptionsResponse(CamelModel):
    job_titles: list[str]
    departments: list[str]
    locations: list[str]
    education_levels: list[str]
    company_sizes: list[str]
