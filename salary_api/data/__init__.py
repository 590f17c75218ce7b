# __init__.py
from salary_api.data.options import (
    COMPANY_SIZE_OPTIONS,
    DEPARTMENT_OPTIONS,
    EDUCATION_OPTIONS,
    JOB_TITLE_OPTIONS,
    LOCATION_OPTIONS,
)

__all__ = [
    "COMPANY_SIZE_OPTIONS",
    "DEPARTMENT_OPTIONS",
    "EDUCATION_OPTIONS",
    "JOB_TITLE_OPTIONS",
    "LOCATION_OPTIONS",
]
