"""Load employees into the configured database.

Without --csv the three sample employees are inserted (only into an empty
table). With --csv every valid row of the file becomes an employee.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from salary_api.database import SessionLocal, init_db  # noqa: E402
from salary_api.services.datasets import parse_csv  # noqa: E402
from salary_api.services.storage import bulk_create_employees, seed_sample_employees  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the employees table.")
    parser.add_argument("--csv", type=Path, default=None, help="CSV in the dataset or dashboard layout.")
    parser.add_argument("--limit", type=int, default=None, help="Insert at most this many CSV rows.")
    args = parser.parse_args(argv)

    init_db()
    with SessionLocal() as db:
        if args.csv is None:
            added = seed_sample_employees(db)
            print(f"sample employees added: {added}")
            return 0

        if not args.csv.exists():
            print(f"not found: {args.csv}")
            return 2
        records = parse_csv(args.csv.read_text(encoding="utf-8-sig"))
        if args.limit is not None:
            records = records[: args.limit]
        rows = [
            {
                "job_title": r.job_title,
                "experience": int(round(r.experience)),
                "department": r.department,
                "location": r.location,
                "education_level": r.education_level,
                "company_size": r.company_size,
                "actual_salary": r.salary,
            }
            for r in records
        ]
        added = bulk_create_employees(db, rows)
        print(f"employees added from {args.csv.name}: {added}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
