from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from salary_api.models.employee import Employee


# (label, inclusive upper bound); the last bucket is open-ended.
EXPERIENCE_RANGES: tuple[tuple[str, int | None], ...] = (
    ("0-2", 2),
    ("3-5", 5),
    ("6-10", 10),
    ("11-15", 15),
    ("16-20", 20),
    ("20+", None),
)


def experience_bucket(years: int) -> str:
    for label, upper in EXPERIENCE_RANGES:
        if upper is None or years <= upper:
            return label
    return EXPERIENCE_RANGES[-1][0]


def _with_salary(db: Session):
    return db.query(Employee).filter(Employee.actual_salary.isnot(None), Employee.actual_salary > 0)


def average_salary_by_department(db: Session) -> dict[str, float]:
    rows = (
        db.query(Employee.department, func.avg(Employee.actual_salary))
        .filter(Employee.actual_salary.isnot(None), Employee.actual_salary > 0)
        .group_by(Employee.department)
        .order_by(Employee.department)
        .all()
    )
    return {dept: float(avg) for dept, avg in rows if avg is not None}


def salary_by_experience_range(db: Session) -> dict[str, float]:
    buckets: dict[str, list[float]] = {label: [] for label, _ in EXPERIENCE_RANGES}
    for years, salary in _with_salary(db).with_entities(Employee.experience, Employee.actual_salary):
        buckets[experience_bucket(int(years))].append(float(salary))
    return {label: (sum(vals) / len(vals) if vals else 0.0) for label, vals in buckets.items()}


def average_salary(db: Session) -> float:
    avg = _with_salary(db).with_entities(func.avg(Employee.actual_salary)).scalar()
    return float(avg) if avg is not None else 0.0


def total_employee_count(db: Session, dataset_records: int = 0) -> int:
    persisted = int(db.query(func.count(Employee.id)).scalar() or 0)
    return persisted + max(0, int(dataset_records))
