"""Fire concurrent prediction requests at a running server and print timings.

Run:
- python scripts/stress_test.py --base-url http://localhost:8000 --concurrent 10
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

from salary_api.utils.load_test import assess, run_concurrent, run_sequential, summarize  # noqa: E402


async def _run(base_url: str, concurrent: int, sequential: int, delay: float) -> int:
    print(f"Testing {concurrent} concurrent requests against {base_url} ...")
    results, elapsed = await run_concurrent(base_url, concurrent)
    summary = summarize(results, elapsed)

    print(f"\nConcurrent results ({elapsed * 1000:.0f}ms total)")
    print(f"  successful: {summary.successful}/{summary.total}")
    print(f"  failed:     {summary.failed}/{summary.total}")
    if summary.successful:
        print(f"  avg: {summary.avg_ms:.0f}ms  min: {summary.min_ms:.0f}ms  max: {summary.max_ms:.0f}ms")
        print(f"  throughput: {summary.throughput_rps} requests/second")
        for i, r in enumerate([r for r in results if r.success][:3], start=1):
            print(f"  sample {i}: {r.prediction} ({r.response_time_ms:.0f}ms)")
    for r in results:
        if not r.success:
            print(f"  failed: {r.error} ({r.response_time_ms:.0f}ms)")

    print(f"\nSequential requests ({sequential}, same payload) ...")
    seq = await run_sequential(base_url, sequential, delay=delay)
    for i, r in enumerate(seq, start=1):
        label = "cached" if r.cached else "new"
        outcome = f"{r.response_time_ms:.0f}ms ({label})" if r.success else f"failed - {r.error}"
        print(f"  request {i}: {outcome}")

    verdict = assess(summary)
    if verdict == "excellent" and not all(r.success for r in seq):
        verdict = "good"
    print(f"\nAssessment: {verdict.upper()}")
    return 0 if verdict != "needs improvement" else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Concurrent + sequential load test for POST /api/predict.")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--concurrent", type=int, default=10)
    parser.add_argument("--sequential", type=int, default=5)
    parser.add_argument("--delay", type=float, default=0.1, help="Seconds between sequential requests.")
    args = parser.parse_args(argv)
    return asyncio.run(_run(args.base_url, args.concurrent, args.sequential, args.delay))


if __name__ == "__main__":
    raise SystemExit(main())
