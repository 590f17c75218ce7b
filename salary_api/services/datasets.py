"""Training-record ingestion from CSV files and persisted employees.

Two header layouts are understood:

* the bulk dataset layout (``EmployeeID,Name,Age,Gender,EducationLevel,
  YearsOfExperience,Department,JobRole,Location,EmploymentType,
  PerformanceRating,Certifications,Salary``), and
* the dashboard layout (``jobTitle,experience,department,location,
  educationLevel,companySize,actualSalary``), snake_case also accepted.

Columns the models do not use are ignored.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable


logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Same bound the employee schemas accept.
MAX_EXPERIENCE_YEARS = 60

_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "job_title": ("jobtitle", "jobrole", "title", "role"),
    "experience": ("experience", "yearsofexperience", "years"),
    "department": ("department", "dept"),
    "location": ("location", "city"),
    "education_level": ("educationlevel", "education"),
    "company_size": ("companysize",),
    "salary": ("actualsalary", "salary"),
}


@dataclass(frozen=True)
class TrainingRecord:
    job_title: str
    experience: float
    department: str
    location: str
    education_level: str
    company_size: str
    salary: float

    def features(self) -> dict[str, Any]:
        return {
            "job_title": self.job_title,
            "experience": self.experience,
            "department": self.department,
            "location": self.location,
            "education_level": self.education_level,
            "company_size": self.company_size,
        }


def _norm_header(name: str | None) -> str:
    return re.sub(r"[^a-z0-9]", "", (name or "").lower())


def _column_map(fieldnames: Iterable[str]) -> dict[str, str]:
    by_norm = {_norm_header(name): name for name in fieldnames if name}
    mapping: dict[str, str] = {}
    for target, aliases in _HEADER_ALIASES.items():
        for alias in aliases:
            if alias in by_norm:
                mapping[target] = by_norm[alias]
                break
    return mapping


def _text(row: dict[str, Any], column: str | None) -> str:
    if not column:
        return UNKNOWN
    value = (row.get(column) or "").strip()
    return value or UNKNOWN


def _number(row: dict[str, Any], column: str | None) -> float | None:
    if not column:
        return None
    raw = (row.get(column) or "").strip().replace(",", "")
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_csv(content: str) -> list[TrainingRecord]:
    reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")))
    if not reader.fieldnames:
        return []
    columns = _column_map(reader.fieldnames)
    if "salary" not in columns or "experience" not in columns:
        logger.warning("CSV has no salary/experience columns: %s", reader.fieldnames)
        return []

    records: list[TrainingRecord] = []
    for line_no, row in enumerate(reader, start=2):
        salary = _number(row, columns.get("salary"))
        experience = _number(row, columns.get("experience"))
        if salary is None or experience is None or salary <= 0 or not 0 <= experience <= MAX_EXPERIENCE_YEARS:
            logger.debug("Skipping invalid record at line %d", line_no)
            continue
        records.append(
            TrainingRecord(
                job_title=_text(row, columns.get("job_title")),
                experience=experience,
                department=_text(row, columns.get("department")),
                location=_text(row, columns.get("location")),
                education_level=_text(row, columns.get("education_level")),
                company_size=_text(row, columns.get("company_size")),
                salary=salary,
            )
        )
    return records


def load_datasets(directory: Path | str) -> list[TrainingRecord]:
    root = Path(directory)
    if not root.is_dir():
        logger.info("No dataset directory at %s", root)
        return []

    all_records: list[TrainingRecord] = []
    for path in sorted(root.glob("*.csv")):
        try:
            records = parse_csv(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            logger.warning("Failed to load %s: %s", path, exc)
            continue
        logger.info("Loaded %d records from %s", len(records), path.name)
        all_records.extend(records)

    logger.info("Total loaded dataset records: %d", len(all_records))
    return all_records


def records_from_employees(employees: Iterable[Any]) -> list[TrainingRecord]:
    out: list[TrainingRecord] = []
    for emp in employees:
        salary = getattr(emp, "actual_salary", None)
        if salary is None or salary <= 0:
            continue
        out.append(
            TrainingRecord(
                job_title=emp.job_title,
                experience=float(emp.experience),
                department=emp.department,
                location=emp.location,
                education_level=emp.education_level,
                company_size=emp.company_size,
                salary=float(salary),
            )
        )
    return out
