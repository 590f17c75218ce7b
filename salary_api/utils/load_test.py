# load_test.py
"""Small HTTP load runner for the prediction endpoint.

``run_concurrent`` fires every request at once; ``run_sequential`` repeats a
single payload so cache warm-up shows up in the timings. There are no retries:
a failed request is recorded and reported as such.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Sequence

import httpx


PREDICT_PATH = "/api/predict"
DEFAULT_TIMEOUT_SECONDS = 30.0

SAMPLE_PAYLOADS: tuple[dict[str, Any], ...] = (
    {
        "jobTitle": "Software Engineer",
        "experience": 5,
        "department": "IT",
        "location": "Bangalore",
        "educationLevel": "Bachelor",
        "companySize": "Medium (100-999)",
    },
    {
        "jobTitle": "Data Scientist",
        "experience": 8,
        "department": "Data Science",
        "location": "Mumbai",
        "educationLevel": "Master",
        "companySize": "Large (1000+)",
    },
    {
        "jobTitle": "Product Manager",
        "experience": 6,
        "department": "IT",
        "location": "Delhi",
        "educationLevel": "Master",
        "companySize": "Large (1000+)",
    },
    {
        "jobTitle": "Marketing Manager",
        "experience": 3,
        "department": "Marketing",
        "location": "Pune",
        "educationLevel": "Bachelor",
        "companySize": "Small (10-99)",
    },
    {
        "jobTitle": "Sales Manager",
        "experience": 4,
        "department": "Sales",
        "location": "Chennai",
        "educationLevel": "Bachelor",
        "companySize": "Medium (100-999)",
    },
)


@dataclass(frozen=True)
class RequestResult:
    success: bool
    response_time_ms: float
    status_code: int | None = None
    prediction: float | None = None
    cached: bool = False
    error: str | None = None


@dataclass(frozen=True)
class LoadSummary:
    total: int
    successful: int
    failed: int
    avg_ms: float
    min_ms: float
    max_ms: float
    throughput_rps: float

    @property
    def success_ratio(self) -> float:
        return self.successful / self.total if self.total else 0.0


def summarize(results: Sequence[RequestResult], elapsed_seconds: float) -> LoadSummary:
    ok = [r for r in results if r.success]
    times = [r.response_time_ms for r in ok]
    return LoadSummary(
        total=len(results),
        successful=len(ok),
        failed=len(results) - len(ok),
        avg_ms=round(sum(times) / len(times), 1) if times else 0.0,
        min_ms=min(times) if times else 0.0,
        max_ms=max(times) if times else 0.0,
        throughput_rps=round(len(ok) / elapsed_seconds, 1) if elapsed_seconds > 0 else 0.0,
    )


def assess(summary: LoadSummary) -> str:
    if summary.total and summary.successful == summary.total:
        return "excellent"
    if summary.success_ratio >= 0.8:
        return "good"
    return "needs improvement"


async def post_prediction(client: httpx.AsyncClient, payload: dict[str, Any], path: str = PREDICT_PATH) -> RequestResult:
    started = time.perf_counter()
    try:
        response = await client.post(path, json=payload)
    except httpx.HTTPError as exc:
        return RequestResult(False, (time.perf_counter() - started) * 1000, error=str(exc) or type(exc).__name__)

    elapsed = (time.perf_counter() - started) * 1000
    if response.status_code != 200:
        return RequestResult(False, elapsed, status_code=response.status_code, error=f"HTTP {response.status_code}")
    try:
        body = response.json()
    except ValueError:
        return RequestResult(False, elapsed, status_code=response.status_code, error="invalid JSON body")
    if not isinstance(body, dict):
        return RequestResult(False, elapsed, status_code=response.status_code, error="unexpected JSON body")
    return RequestResult(
        True,
        elapsed,
        status_code=response.status_code,
        prediction=(body.get("prediction") or {}).get("linearRegressionPrediction"),
        cached=bool(body.get("cached")),
    )


async def run_concurrent(
    base_url: str,
    n: int,
    payloads: Sequence[dict[str, Any]] = SAMPLE_PAYLOADS,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[list[RequestResult], float]:
    """Fire ``n`` requests at once, cycling through ``payloads``.
    Returns the per-request results and the wall time in seconds."""
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as client:
        started = time.perf_counter()
        results = await asyncio.gather(*(post_prediction(client, payloads[i % len(payloads)]) for i in range(n)))
        return list(results), time.perf_counter() - started


async def run_sequential(
    base_url: str,
    n: int,
    payload: dict[str, Any] = SAMPLE_PAYLOADS[0],
    *,
    delay: float = 0.1,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RequestResult]:
    results: list[RequestResult] = []
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport) as client:
        for i in range(n):
            results.append(await post_prediction(client, payload))
            if delay and i < n - 1:
                await asyncio.sleep(delay)
    return results


def assess_latency(avg_ms: float) -> str:
    if avg_ms < 100:
        return "excellent"
    if avg_ms < 1000:
        return "very good"
    return "acceptable"
