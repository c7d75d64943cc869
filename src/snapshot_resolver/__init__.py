"""Resolve URLs to archived Wayback Machine snapshots.

Usage::

    from snapshot_resolver import SnapshotQuery, SnapshotResolver, TimeRange

    resolver = SnapshotResolver()
    result = resolver.resolve(
        SnapshotQuery("http://example.com", TimeRange("20230101", "20231231"))
    )
    if result.found:
        print(result.snapshot_url)
"""

from __future__ import annotations

from snapshot_resolver.core.exceptions import (
    ArchiveRequestError,
    InvalidInputError,
    SnapshotResolverError,
)
from snapshot_resolver.wayback.models import (
    Found,
    NotFound,
    RequestFailed,
    SnapshotQuery,
    SnapshotResult,
    TimeRange,
)
from snapshot_resolver.wayback.resolver import SnapshotResolver, make_query

__all__ = [
    "SnapshotResolver",
    "make_query",
    "SnapshotQuery",
    "TimeRange",
    "SnapshotResult",
    "Found",
    "NotFound",
    "RequestFailed",
    "SnapshotResolverError",
    "InvalidInputError",
    "ArchiveRequestError",
]
