import pytest

from salary_api.models.data_upload import UPLOAD_STATUS_FAILED, UPLOAD_STATUS_PROCESSED, UPLOAD_STATUS_PROCESSING
from salary_api.schemas.employee import EmployeeCreate
from salary_api.services import storage
from salary_api.services.salary_predictor import PredictionResult, SalaryInput


def _input(title: str = "Software Engineer") -> SalaryInput:
    return SalaryInput(title, 5, "IT", "Pune", "Bachelor", "Small (10-99)")


def test_seed_only_fills_an_empty_table(db) -> None:
    assert storage.seed_sample_employees(db) == 3
    assert storage.seed_sample_employees(db) == 0
    assert storage.count_employees(db) == 3


def test_create_and_group_employees(db) -> None:
    storage.create_employee(
        db,
        EmployeeCreate(job_title="Analyst", experience=2, department="Finance", location="Pune", education_level="Bachelor", company_size="Small (10-99)"),
    )
    storage.seed_sample_employees(db)  # table not empty: no-op
    storage.create_employee(
        db,
        {"job_title": "Accountant", "experience": 4, "department": "Finance", "location": "Delhi", "education_level": "Master", "company_size": "Large (1000+)", "actual_salary": 70000.0},
    )

    grouped = storage.employees_by_department(db)
    assert list(grouped) == ["Finance"]
    assert [e.job_title for e in grouped["Finance"]] == ["Analyst", "Accountant"]
    assert grouped["Finance"][0].actual_salary is None


def test_predictions_are_listed_newest_first(db) -> None:
    result = PredictionResult(100000.0, 101000.0, 85.0)
    for title in ("A", "B", "C"):
        storage.create_prediction(db, _input(title), result)

    recent = storage.list_predictions(db, limit=2)
    assert [p.job_title for p in recent] == ["C", "B"]
    assert recent[0].confidence == 85.0


def test_upload_status_lifecycle(db) -> None:
    first = storage.create_data_upload(db, filename="a.csv", record_count=2)
    second = storage.create_data_upload(db, filename="b.csv", record_count=5)
    assert first.status == UPLOAD_STATUS_PROCESSING

    storage.update_data_upload_status(db, first.id, UPLOAD_STATUS_PROCESSED)
    storage.update_data_upload_status(db, second.id, UPLOAD_STATUS_FAILED)
    # Unknown ids are ignored.
    storage.update_data_upload_status(db, 9999, UPLOAD_STATUS_PROCESSED)

    uploads = storage.list_data_uploads(db)
    assert [(u.filename, u.status) for u in uploads] == [("b.csv", "failed"), ("a.csv", "processed")]


def test_invalid_upload_status_is_rejected(db) -> None:
    upload = storage.create_data_upload(db, filename="a.csv", record_count=1)
    with pytest.raises(ValueError):
        storage.update_data_upload_status(db, upload.id, "done")
    with pytest.raises(ValueError):
        storage.create_data_upload(db, filename="b.csv", record_count=1, status="queued")
