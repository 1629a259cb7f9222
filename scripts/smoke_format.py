#!/usr/bin/env python3
"""
Smoke check for a running citation formatter: hits /health, then formats a
sample bibliography with the bundled minimal style and prints the response.

Usage:
  python scripts/smoke_format.py
  python scripts/smoke_format.py --locale fr-FR     # expect UnsupportedLocale

Environment variables (optional):
  FORMATTER_URL  (default: http://localhost:3000)
"""

import os
import sys
from pathlib import Path
from pprint import pprint

import httpx

FORMATTER = os.getenv("FORMATTER_URL", "http://localhost:3000")
STYLE_PATH = Path(__file__).resolve().parents[1] / "agents" / "citation_formatter" / "csl" / "minimal-author-title.csl"

TIMEOUT = 5

EXAMPLE_ITEMS = {
    "a1": {"type": "book", "title": "The Structure of Scientific Revolutions",
           "author": [{"family": "Kuhn", "given": "Thomas"}, {}, None]},
    "a2": {"type": "article-journal", "title": "Computing Machinery and Intelligence",
           "author": [{"literal": "A. M. Turing"}]},
}


def check_health(client, url):
    health_url = url.rstrip("/") + "/health"
    print(f"Checking formatter health: {health_url}")
    try:
        r = client.get(health_url)
    except httpx.HTTPError as e:
        print(f"  ERROR contacting formatter: {e}")
        return False
    print(f"  status_code: {r.status_code}")
    pprint(r.json())
    return r.status_code == 200 and r.json().get("ok") is True


def submit_format_request(client, url, locale):
    payload = {"items": EXAMPLE_ITEMS, "style": STYLE_PATH.read_text(encoding="utf-8")}
    if locale:
        payload["locale"] = locale
    print(f"Submitting {len(EXAMPLE_ITEMS)} items (locale={locale or 'default'})")
    try:
        r = client.post(url.rstrip("/") + "/format", json=payload)
    except httpx.HTTPError as e:
        print(f"  ERROR sending format request: {e}")
        return None, None
    print(f"  status={r.status_code}")
    try:
        body = r.json()
    except ValueError:
        print("Non-JSON response:", r.text[:1000])
        return r.status_code, None
    pprint(body)
    return r.status_code, body


if __name__ == '__main__':
    locale = None
    if "--locale" in sys.argv:
        locale = sys.argv[sys.argv.index("--locale") + 1]

    with httpx.Client(timeout=TIMEOUT) as client:
        if not check_health(client, FORMATTER):
            print("Formatter is not healthy. Exiting.")
            sys.exit(1)
        status, body = submit_format_request(client, FORMATTER, locale)

    print("\nDone.")
    sys.exit(0 if status == 200 and body and body.get("html") else 2)
