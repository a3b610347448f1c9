from __future__ import annotations

import argparse
import json
import time
import urllib.error
import urllib.request
from typing import Any

SAMPLE_ACTIVITIES = [
    {"id": "first", "startTime": "2024-05-06T09:00:00", "durationMinutes": 60},
    {"id": "second", "startTime": "2024-05-06T09:15:00", "durationMinutes": 60},
    {"id": "late", "startTime": "2024-05-06T10:30:00", "durationMinutes": 30},
]


def fetch(url: str, payload: Any | None = None) -> tuple[int, bytes]:
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    req = urllib.request.Request(url, data=data)
    if data is not None:
        req.add_header("Content-Type", "application/json")
    with urllib.request.urlopen(req, timeout=10) as resp:
        return resp.status, resp.read()


def wait_for(url: str, timeout: int) -> bytes:
    deadline = time.time() + timeout
    last_error: Exception | None = None
    while time.time() < deadline:
        try:
            status, body = fetch(url)
            if status == 200:
                return body
        except (urllib.error.URLError, OSError) as exc:
            last_error = exc
        time.sleep(1)
    raise RuntimeError(f"Timed out waiting for {url}: {last_error}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Smoke test for a running agenda layout API.")
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API root; `uvicorn app.web_main:app` listens on port 8000 by default.",
    )
    parser.add_argument("--timeout", type=int, default=60)
    args = parser.parse_args()

    base = args.base_url.rstrip("/")
    wait_for(f"{base}/api/health", args.timeout)

    status, body = fetch(f"{base}/api/layout/day", {"activities": SAMPLE_ACTIVITIES})
    if status != 200:
        raise RuntimeError(f"Day layout returned {status}")
    layout = json.loads(body.decode("utf-8"))
    columns = {item["id"]: item["columnIndex"] for item in layout.get("items", [])}
    if columns != {"first": 0, "second": 1, "late": 0}:
        raise RuntimeError(f"Unexpected column assignment: {columns}")

    print("Smoke test passed.")


if __name__ == "__main__":
    main()
