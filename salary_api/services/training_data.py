from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

from sqlalchemy.orm import Session

from salary_api.models.employee import Employee
from salary_api.services.datasets import TrainingRecord, load_datasets, records_from_employees


class TrainingDataSource:
    """Dataset files (read once) plus employees persisted with a salary."""

    def __init__(self, datasets_dir: Path | str, session_factory: Callable[[], Session]) -> None:
        self.datasets_dir = Path(datasets_dir)
        self._session_factory = session_factory
        self._file_records: list[TrainingRecord] | None = None
        self._lock = threading.Lock()

    def file_records(self) -> list[TrainingRecord]:
        with self._lock:
            if self._file_records is None:
                self._file_records = load_datasets(self.datasets_dir)
            return self._file_records

    def file_record_count(self) -> int:
        return len(self.file_records())

    def employee_records(self) -> list[TrainingRecord]:
        with self._session_factory() as db:
            return records_from_employees(db.query(Employee).all())

    def collect(self) -> list[TrainingRecord]:
        return list(self.file_records()) + self.employee_records()
