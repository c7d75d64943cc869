"""Exception hierarchy for the snapshot resolver.

All custom exceptions subclass ``SnapshotResolverError``, so callers can
catch the whole hierarchy with a single ``except`` clause.

Hierarchy::

    SnapshotResolverError
    ├── InvalidInputError        (also a ValueError; field: str | None)
    └── ArchiveRequestError      (status_code: int | None)

Only :class:`InvalidInputError` ever reaches the caller of
:meth:`~snapshot_resolver.wayback.resolver.SnapshotResolver.resolve`.
:class:`ArchiveRequestError` is raised by the low-level fetcher and turned
into a :class:`~snapshot_resolver.wayback.models.RequestFailed` result.
"""

from __future__ import annotations


class SnapshotResolverError(Exception):
    """Base class for all snapshot resolver exceptions."""


class InvalidInputError(SnapshotResolverError, ValueError):
    """Raised when a snapshot query is malformed.

    Detected before any network I/O is attempted.

    Args:
        message: Human-readable description of the problem.
        field: Name of the offending query field (e.g. ``"target_url"``).
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ArchiveRequestError(SnapshotResolverError):
    """Raised when the availability endpoint cannot be queried successfully.

    Covers transport failures (timeouts, connection errors), non-success
    HTTP statuses, and undecodable payloads.

    Args:
        message: Human-readable description of the failure.
        status_code: HTTP status code, when the failure was an HTTP status.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
