from __future__ import annotations

import argparse
import json

import httpx


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Query /api/health and /api/health/db on a running server.")
    parser.add_argument("--base-url", default="http://localhost:8000")
    args = parser.parse_args(argv)

    rc = 0
    with httpx.Client(base_url=args.base_url, timeout=10.0) as client:
        for path in ("/api/health", "/api/health/db"):
            try:
                r = client.get(path)
            except httpx.HTTPError as exc:
                print(f"GET {path} -> error: {exc}")
                rc = 1
                continue
            print(f"GET {path} ->", r.status_code)
            print(json.dumps(r.json(), indent=2, ensure_ascii=False))
            if r.status_code != 200:
                rc = 1
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
