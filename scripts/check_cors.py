#!/usr/bin/env python3
"""
CORS configuration check
Verifies that a running Tienda Manager API only answers the allowed origins
"""

import argparse
import sys
from typing import Dict, List, Optional, Tuple

import requests

BLOCKED_ORIGINS = [
    "https://malicious-site.com",
    "http://evil.com",
]

def is_origin_allowed(origin: Optional[str], allow_origin_header: Optional[str], status_code: int) -> bool:
    if origin is None:
        # Llamada directa sin navegador
        return status_code == 200
    return allow_origin_header in (origin, "*")

def build_cases(allowed_origins: List[str]) -> List[Tuple[Optional[str], bool]]:
    cases = [(origin, True) for origin in allowed_origins]
    cases += [(origin, False) for origin in BLOCKED_ORIGINS if origin not in allowed_origins]
    cases.append((None, True))
    return cases

def check_origin(base_url: str, origin: Optional[str], should_be_allowed: bool) -> Dict:
    test_name = f"Origin: {origin or 'None (Direct)'}"
    headers = {"Origin": origin} if origin else {}

    try:
        preflight = requests.options(
            f"{base_url}/api/v1/",
            headers={
                **headers,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization,Content-Type"
            } if origin else {},
            timeout=10
        )
        response = requests.get(f"{base_url}/api/v1/", headers=headers, timeout=10)
    except requests.exceptions.RequestException as e:
        return {"test_name": test_name, "status": "ERROR", "message": f"Request failed: {e}"}

    allowed = is_origin_allowed(
        origin,
        response.headers.get("Access-Control-Allow-Origin"),
        response.status_code
    )
    passed = allowed == should_be_allowed
    return {
        "test_name": test_name,
        "status": "PASS" if passed else "FAIL",
        "message": f"Origin {'allowed' if allowed else 'blocked'} (expected {'allowed' if should_be_allowed else 'blocked'})",
        "preflight_status": preflight.status_code,
        "actual_status": response.status_code
    }

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check CORS configuration of a running API")
    parser.add_argument("base_url", nargs="?", default="http://localhost:8000")
    parser.add_argument("--allow", action="append", help="Origin expected to be allowed (repeatable)")
    args = parser.parse_args(argv)

    allowed_origins = args.allow
    if not allowed_origins:
        from app.config.settings import settings
        allowed_origins = settings.allowed_origins

    print(f"🧪 Testing CORS configuration for: {args.base_url}\n")
    results = [check_origin(args.base_url, origin, expected) for origin, expected in build_cases(allowed_origins)]

    for result in results:
        emoji = "✅" if result["status"] == "PASS" else "❌" if result["status"] == "FAIL" else "⚠️"
        print(f"{emoji} {result['test_name']}: {result['message']}")

    failed = sum(1 for r in results if r["status"] != "PASS")
    print(f"\n📊 {len(results) - failed}/{len(results)} passed")
    return 1 if failed else 0

if __name__ == "__main__":
    sys.exit(main())
