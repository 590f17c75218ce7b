# storage.py
from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from salary_api.models.data_upload import UPLOAD_STATUS_PROCESSING, UPLOAD_STATUSES, DataUpload
from salary_api.models.employee import Employee
from salary_api.models.prediction import Prediction
from salary_api.schemas.employee import EmployeeCreate
from salary_api.services.salary_predictor import PredictionResult, SalaryInput


DEFAULT_PREDICTION_LIMIT = 10

SAMPLE_EMPLOYEES: tuple[dict[str, Any], ...] = (
    {
        "job_title": "Software Engineer",
        "experience": 5,
        "department": "Engineering",
        "location": "San Francisco",
        "education_level": "Bachelor's",
        "company_size": "Large (501-5000)",
        "actual_salary": 120000.0,
    },
    {
        "job_title": "Marketing Manager",
        "experience": 7,
        "department": "Marketing",
        "location": "New York",
        "education_level": "Master's",
        "company_size": "Medium (51-500)",
        "actual_salary": 85000.0,
    },
    {
        "job_title": "Sales Representative",
        "experience": 3,
        "department": "Sales",
        "location": "Chicago",
        "education_level": "Bachelor's",
        "company_size": "Startup (1-50)",
        "actual_salary": 65000.0,
    },
)


def create_employee(db: Session, payload: EmployeeCreate | dict[str, Any]) -> Employee:
    data = payload.model_dump() if isinstance(payload, EmployeeCreate) else dict(payload)
    employee = Employee(**data)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def bulk_create_employees(db: Session, rows: list[dict[str, Any]]) -> int:
    if not rows:
        return 0
    db.add_all([Employee(**row) for row in rows])
    db.commit()
    return len(rows)


def list_employees(db: Session) -> list[Employee]:
    return db.query(Employee).order_by(Employee.id).all()


def employees_by_department(db: Session) -> dict[str, list[Employee]]:
    grouped: dict[str, list[Employee]] = {}
    for emp in list_employees(db):
        grouped.setdefault(emp.department, []).append(emp)
    return grouped


def count_employees(db: Session) -> int:
    return int(db.query(Employee).count())


def create_prediction(db: Session, data: SalaryInput, result: PredictionResult) -> Prediction:
    record = Prediction(
        job_title=data.job_title,
        experience=data.experience,
        department=data.department,
        location=data.location,
        education_level=data.education_level,
        company_size=data.company_size,
        linear_regression_prediction=result.linear_regression_prediction,
        random_forest_prediction=result.random_forest_prediction,
        confidence=result.confidence,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def list_predictions(db: Session, limit: int = DEFAULT_PREDICTION_LIMIT) -> list[Prediction]:
    return db.query(Prediction).order_by(Prediction.id.desc()).limit(max(1, int(limit))).all()


def create_data_upload(db: Session, *, filename: str, record_count: int, status: str = UPLOAD_STATUS_PROCESSING) -> DataUpload:
    if status not in UPLOAD_STATUSES:
        raise ValueError(f"invalid upload status: {status!r}")
    upload = DataUpload(filename=filename, record_count=int(record_count), status=status)
    db.add(upload)
    db.commit()
    db.refresh(upload)
    return upload


def list_data_uploads(db: Session) -> list[DataUpload]:
    return db.query(DataUpload).order_by(DataUpload.id.desc()).all()


def get_data_upload(db: Session, upload_id: int) -> DataUpload | None:
    return db.get(DataUpload, upload_id)


def update_data_upload_status(db: Session, upload_id: int, status: str) -> None:
    if status not in UPLOAD_STATUSES:
        raise ValueError(f"invalid upload status: {status!r}")
    upload = db.get(DataUpload, upload_id)
    if upload is None:
        return
    upload.status = status
    db.commit()


def seed_sample_employees(db: Session) -> int:
    """Insert the sample employees into an empty table. Returns rows added."""
    if count_employees(db) > 0:
        return 0
    return bulk_create_employees(db, [dict(row) for row in SAMPLE_EMPLOYEES])
