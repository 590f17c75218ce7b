from fastapi import APIRouter

from salary_api.data import (
    COMPANY_SIZE_OPTIONS,
    DEPARTMENT_OPTIONS,
    EDUCATION_OPTIONS,
    JOB_TITLE_OPTIONS,
    LOCATION_OPTIONS,
)
from salary_api.schemas.options import OptionsResponse


router = APIRouter(tags=["options"])


@router.get("/options", response_model=OptionsResponse, summary="Values offered by the prediction form")
def get_options() -> OptionsResponse:
    return OptionsResponse(
        job_titles=list(JOB_TITLE_OPTIONS),
        departments=list(DEPARTMENT_OPTIONS),
        locations=list(LOCATION_OPTIONS),
        education_levels=list(EDUCATION_OPTIONS),
        company_sizes=list(COMPANY_SIZE_OPTIONS),
    )
