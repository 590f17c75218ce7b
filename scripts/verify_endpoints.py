from __future__ import annotations

import json
import os
import sys

from fastapi.testclient import TestClient

# Ensure salary_api/ is importable when running as a script.
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from salary_api.main import create_app
from salary_api.utils.load_test import SAMPLE_PAYLOADS


def main() -> int:
    with TestClient(create_app()) as client:
        # 1) health
        r = client.get("/api/health")
        print("GET /api/health ->", r.status_code)
        print(json.dumps(r.json(), indent=2, ensure_ascii=False))
        if r.status_code != 200:
            return 1

        # 2) predict twice; the second answer should come from the cache
        for attempt in (1, 2):
            r2 = client.post("/api/predict", json=SAMPLE_PAYLOADS[0])
            print(f"\nPOST /api/predict (attempt {attempt}) ->", r2.status_code)
            body = r2.json()
            print(json.dumps(body, indent=2, ensure_ascii=False))
            if r2.status_code != 200:
                return 1
        if not body.get("cached"):
            print("second prediction was not served from the cache")
            return 2

        # 3) read endpoints
        for path in ("/api/analytics/stats", "/api/model-status", "/api/model-metrics", "/api/performance-status"):
            r3 = client.get(path)
            print(f"\nGET {path} ->", r3.status_code)
            print(json.dumps(r3.json(), indent=2, ensure_ascii=False))
            if r3.status_code != 200:
                return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
