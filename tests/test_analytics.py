import pytest

from salary_api.services import analytics, storage


def _employee(dept: str, years: int, salary: float | None) -> dict:
    return {
        "job_title": "Analyst",
        "experience": years,
        "department": dept,
        "location": "Pune",
        "education_level": "Bachelor",
        "company_size": "Small (10-99)",
        "actual_salary": salary,
    }


def test_experience_buckets() -> None:
    assert analytics.experience_bucket(0) == "0-2"
    assert analytics.experience_bucket(2) == "0-2"
    assert analytics.experience_bucket(3) == "3-5"
    assert analytics.experience_bucket(10) == "6-10"
    assert analytics.experience_bucket(20) == "16-20"
    assert analytics.experience_bucket(21) == "20+"


def test_empty_database(db) -> None:
    assert analytics.average_salary_by_department(db) == {}
    assert analytics.salary_by_experience_range(db) == {
        "0-2": 0.0,
        "3-5": 0.0,
        "6-10": 0.0,
        "11-15": 0.0,
        "16-20": 0.0,
        "20+": 0.0,
    }
    assert analytics.average_salary(db) == 0.0
    assert analytics.total_employee_count(db) == 0


def test_averages_ignore_missing_salaries(db) -> None:
    storage.bulk_create_employees(
        db,
        [
            _employee("IT", 1, 50000),
            _employee("IT", 4, 70000),
            _employee("HR", 12, 60000),
            _employee("HR", 25, None),
            _employee("Sales", 30, 90000),
        ],
    )

    assert analytics.average_salary_by_department(db) == {"HR": 60000.0, "IT": 60000.0, "Sales": 90000.0}

    by_range = analytics.salary_by_experience_range(db)
    assert by_range["0-2"] == 50000.0
    assert by_range["3-5"] == 70000.0
    assert by_range["11-15"] == 60000.0
    assert by_range["6-10"] == 0.0
    assert by_range["20+"] == 90000.0

    assert analytics.average_salary(db) == pytest.approx(67500.0)
    assert analytics.total_employee_count(db, dataset_records=10) == 15
