"""Replay a few user journeys against a running server.

Each scenario sends its requests one by one with a pause in between, then an
impatient user fires the same request several times at once.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

import httpx  # noqa: E402

from salary_api.utils.load_test import (  # noqa: E402
    SAMPLE_PAYLOADS,
    assess_latency,
    post_prediction,
    run_concurrent,
    summarize,
)


def _payload(title: str, years: int, dept: str, city: str, edu: str, size: str) -> dict:
    return {
        "jobTitle": title,
        "experience": years,
        "department": dept,
        "location": city,
        "educationLevel": edu,
        "companySize": size,
    }


SCENARIOS: dict[str, list[dict]] = {
    "New Graduate": [
        _payload("Software Engineer", 0, "IT", "Bangalore", "Bachelor", "Medium (100-999)"),
        _payload("Data Scientist", 0, "Data Science", "Mumbai", "Master", "Large (1000+)"),
    ],
    "Mid-Level Professional": [
        _payload("Product Manager", 5, "IT", "Delhi", "Master", "Large (1000+)"),
        _payload("Marketing Manager", 4, "Marketing", "Pune", "Bachelor", "Medium (100-999)"),
    ],
    "Senior Professional": [
        _payload("Software Engineer", 10, "IT", "Bangalore", "Master", "Large (1000+)"),
        _payload("Finance Manager", 8, "Finance", "Mumbai", "Master", "Large (1000+)"),
    ],
}


async def _run(base_url: str, think_time: float, rapid: int) -> int:
    all_results = []
    by_scenario: dict[str, list] = {}
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        for name, requests in SCENARIOS.items():
            print(f"Scenario: {name}")
            for i, payload in enumerate(requests, start=1):
                r = await post_prediction(client, payload)
                all_results.append(r)
                by_scenario.setdefault(name, []).append(r)
                if r.success:
                    print(f"  {i}. {payload['jobTitle']} ({payload['experience']}y): {r.prediction} in {r.response_time_ms:.0f}ms")
                else:
                    print(f"  {i}. {payload['jobTitle']}: failed - {r.error}")
                await asyncio.sleep(think_time)

    print(f"\nRapid-fire: {rapid} identical requests at once")
    rapid_results, _elapsed = await run_concurrent(base_url, rapid, [SAMPLE_PAYLOADS[0]])
    for i, r in enumerate(rapid_results, start=1):
        print(f"  {i}. {r.prediction} ({'cached' if r.cached else 'new'})")

    summary = summarize(all_results, elapsed_seconds=0)
    print(f"\nSuccessful predictions: {summary.successful}/{summary.total}")
    if summary.successful:
        print(f"avg: {summary.avg_ms:.0f}ms  min: {summary.min_ms:.0f}ms  max: {summary.max_ms:.0f}ms")
        for name, results in by_scenario.items():
            values = [r.prediction for r in results if r.success and r.prediction is not None]
            if values:
                print(f"  {name}: {min(values):,.0f} - {max(values):,.0f} (avg {sum(values) / len(values):,.0f})")

    if summary.failed:
        print("Assessment: ISSUES - some predictions failed")
        return 1
    print(f"Assessment: {assess_latency(summary.avg_ms).upper()}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate dashboard users hitting POST /api/predict.")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--think-time", type=float, default=0.5, help="Seconds between a user's requests.")
    parser.add_argument("--rapid", type=int, default=5)
    args = parser.parse_args(argv)
    return asyncio.run(_run(args.base_url, args.think_time, args.rapid))


if __name__ == "__main__":
    raise SystemExit(main())
