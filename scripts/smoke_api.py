#!/usr/bin/env python3
"""Smoke test against a running favorites API.

Walks one throwaway favorite through create, list, duplicate and delete,
then removes it. Safe to run against production.

Usage:
    python scripts/smoke_api.py [BASE_URL]

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import sys
import uuid

import requests

DEFAULT_BASE_URL = "http://localhost:5001"
TIMEOUT = 10


def check(label: str, response: requests.Response, expected_status: int) -> bool:
    """Print OK/FAIL for one request."""
    if response.status_code == expected_status:
        print(f"OK: {label} -> {response.status_code}")
        return True
    print(f"FAIL: {label} -> {response.status_code} (expected {expected_status})")
    print(f"    Body: {response.text.strip()}")
    return False


def main() -> int:
    base_url = (sys.argv[1] if len(sys.argv) > 1 else DEFAULT_BASE_URL).rstrip("/")
    user_id = f"smoke-{uuid.uuid4().hex[:8]}"
    favorite = {"userId": user_id, "recipeId": 52772, "title": "Smoke Test Teriyaki"}

    print("=" * 60)
    print(f"Favorites API smoke test: {base_url} (user {user_id})")
    print("=" * 60)

    results = [
        check("GET /health", requests.get(f"{base_url}/health", timeout=TIMEOUT), 200),
        check(
            "POST /favorites",
            requests.post(f"{base_url}/favorites", json=favorite, timeout=TIMEOUT),
            201,
        ),
        check(
            "POST /favorites (duplicate)",
            requests.post(f"{base_url}/favorites", json=favorite, timeout=TIMEOUT),
            409,
        ),
    ]

    listed = requests.get(f"{base_url}/favorites/{user_id}", timeout=TIMEOUT)
    results.append(check(f"GET /favorites/{user_id}", listed, 200))
    if listed.ok and len(listed.json()) != 1:
        print(f"FAIL: expected 1 favorite, got {len(listed.json())}")
        results.append(False)

    delete_url = f"{base_url}/favorites/{user_id}/{favorite['recipeId']}"
    results.append(check("DELETE favorite", requests.delete(delete_url, timeout=TIMEOUT), 200))
    results.append(
        check("DELETE favorite (again)", requests.delete(delete_url, timeout=TIMEOUT), 404)
    )

    print()
    if all(results):
        print("All checks passed")
        return 0
    print(f"{results.count(False)} check(s) failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
