#!/usr/bin/env python
"""Resolve a URL to its closest archived Wayback Machine snapshot.

Run from the project root::

    python scripts/resolve_snapshot.py http://example.com --from 20230101 --to 20231231

Options:
    URL        (required) Absolute http(s) URL to look up.
    --from     Earliest capture date, YYYYMMDD. Requires --to.
    --to       Latest capture date, YYYYMMDD. Requires --from.
    --timeout  Request timeout in seconds (default: from settings).
    --json     Print the result as a JSON object instead of plain text.

Exit codes:
    0 — Snapshot found.
    1 — No snapshot archived for the URL / range.
    2 — Invalid input (malformed URL or date range).
    3 — Request failed (timeout, connection error, HTTP error).
    4 — Invalid SNAPSHOT_RESOLVER_* configuration.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import os
import sys
from typing import Optional, assert_never

from pydantic import ValidationError

# Ensure the src layout is on sys.path when run as a standalone script.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.join(os.path.dirname(_SCRIPT_DIR), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)

from snapshot_resolver import (  # noqa: E402
    Found,
    InvalidInputError,
    NotFound,
    RequestFailed,
    SnapshotResolver,
    SnapshotResult,
    make_query,
)
from snapshot_resolver.config.settings import get_settings  # noqa: E402
from snapshot_resolver.core.logging_config import configure_logging  # noqa: E402

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID_INPUT = 2
EXIT_REQUEST_FAILED = 3
EXIT_CONFIG_ERROR = 4


def _render(result: SnapshotResult, as_json: bool) -> tuple[str, int]:
    """Return the text to print for *result* and the matching exit code."""
    match result:
        case Found():
            kind, code = "found", EXIT_FOUND
            text = f"{result.snapshot_url}\t{result.timestamp}"
        case NotFound():
            kind, code = "not_found", EXIT_NOT_FOUND
            text = f"No snapshot archived for {result.target_url}"
        case RequestFailed():
            kind, code = "request_failed", EXIT_REQUEST_FAILED
            text = f"Request failed: {result.reason}"
        case _:
            assert_never(result)
    if as_json:
        text = json.dumps({"result": kind, **dataclasses.asdict(result)})
    return text, code


def main(argv: Optional[list[str]] = None) -> int:
    """Parse CLI arguments, resolve the snapshot, and print the result."""
    parser = argparse.ArgumentParser(
        description="Resolve a URL to its closest archived Wayback Machine snapshot.",
    )
    parser.add_argument("url", help="Absolute http(s) URL to look up.")
    parser.add_argument("--from", dest="start", default=None, help="Start date, YYYYMMDD.")
    parser.add_argument("--to", dest="end", default=None, help="End date, YYYYMMDD.")
    parser.add_argument("--timeout", type=float, default=None, help="Timeout in seconds.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"[resolve_snapshot] CONFIG ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)

    try:
        resolver = SnapshotResolver(timeout=args.timeout)
    except ValueError as exc:
        print(f"[resolve_snapshot] ERROR: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        result = resolver.resolve(make_query(args.url, args.start, args.end))
    except InvalidInputError as exc:
        print(f"[resolve_snapshot] ERROR: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    text, code = _render(result, args.json)
    print(text)
    return code


if __name__ == "__main__":
    sys.exit(main())
