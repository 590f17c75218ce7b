from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salary_api.api.deps import AppServices, get_services
from salary_api.database import get_db
from salary_api.error_handlers import FetchError
from salary_api.schemas.employee import EmployeeCreate, EmployeeOut
from salary_api.services import storage


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeOut])
def list_employees(db: Session = Depends(get_db)) -> list[EmployeeOut]:
    try:
        return [EmployeeOut.model_validate(e) for e in storage.list_employees(db)]
    except SQLAlchemyError as exc:
        logger.exception("Failed to list employees")
        raise FetchError("employees") from exc


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_db),
    services: AppServices = Depends(get_services),
) -> EmployeeOut:
    employee = storage.create_employee(db, payload)
    for cache in services.derived_caches:
        cache.clear()
    logger.info("Employee %s created (%s, %s)", employee.id, employee.job_title, employee.department)
    return EmployeeOut.model_validate(employee)


@router.get("/by-department", response_model=dict[str, list[EmployeeOut]])
def list_employees_by_department(db: Session = Depends(get_db)) -> dict[str, list[EmployeeOut]]:
    try:
        grouped = storage.employees_by_department(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to group employees by department")
        raise FetchError("employees by department") from exc
    return {dept: [EmployeeOut.model_validate(e) for e in rows] for dept, rows in grouped.items()}
