from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"

    # Rule-based predictions only, no seeded rows, no background tasks.
    os.environ["MODEL_TRAINING_ON_STARTUP"] = "false"
    os.environ["SEED_SAMPLE_DATA"] = "false"
    os.environ["PERFORMANCE_REPORT_INTERVAL_SECONDS"] = "0"
    os.environ["DATASETS_DIR"] = "./tests/_no_datasets"


def reset_database() -> None:
    from salary_api.database import Base, engine
    import salary_api.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture()
def db() -> Any:
    from salary_api.database import SessionLocal

    reset_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Any:
    from salary_api.main import create_app

    reset_database()
    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def predict_payload() -> dict[str, Any]:
    return {
        "jobTitle": "Software Engineer",
        "experience": 5,
        "department": "IT",
        "location": "Bangalore",
        "educationLevel": "Bachelor",
        "companySize": "Medium (100-999)",
    }
