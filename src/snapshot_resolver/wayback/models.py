"""Query and result types for snapshot resolution.

A :class:`SnapshotQuery` is built by the caller, handed once to
:meth:`~snapshot_resolver.wayback.resolver.SnapshotResolver.resolve`, and
produces exactly one :data:`SnapshotResult`:

- :class:`Found` — the archive returned a closest-match snapshot.
- :class:`NotFound` — the request succeeded but nothing is archived.
- :class:`RequestFailed` — transport or HTTP-level failure.

Queries are plain containers; they are validated by the resolver, which
raises :class:`~snapshot_resolver.core.exceptions.InvalidInputError` before
any network call when a query is malformed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Union

from snapshot_resolver.wayback._fetcher import parse_wb_timestamp

DateBound = Union[date, str]
"""A range bound: a ``date``/``datetime`` or a ``YYYYMMDD`` / ``YYYY-MM-DD`` string."""


@dataclass(frozen=True)
class TimeRange:
    """Inclusive date range constraining the snapshot lookup.

    Attributes:
        start: Earliest acceptable capture date.
        end: Latest acceptable capture date. Must not precede *start*.
    """

    start: DateBound
    end: DateBound


@dataclass(frozen=True)
class SnapshotQuery:
    """A single snapshot lookup.

    Attributes:
        target_url: Absolute ``http``/``https`` URL to look up.
        time_range: Optional :class:`TimeRange`; ``None`` asks for the
            closest snapshot overall.
    """

    target_url: str
    time_range: TimeRange | None = None


@dataclass(frozen=True)
class Found:
    """The archive returned a closest-match snapshot.

    ``snapshot_url`` and ``timestamp`` are taken verbatim from the payload.

    Attributes:
        snapshot_url: Full Wayback Machine playback URL.
        timestamp: 14-digit capture timestamp (``YYYYMMDDhhmmss``).
        status: HTTP status the archive recorded for the capture, if reported.
    """

    snapshot_url: str
    timestamp: str
    status: str | None = None
    found: ClassVar[bool] = True

    @property
    def captured_at(self) -> datetime | None:
        """Capture time as a UTC ``datetime``, or ``None`` if unparseable."""
        return parse_wb_timestamp(self.timestamp)


@dataclass(frozen=True)
class NotFound:
    """The lookup succeeded but the archive holds no matching snapshot."""

    target_url: str
    found: ClassVar[bool] = False


@dataclass(frozen=True)
class RequestFailed:
    """The lookup could not be completed.

    Attributes:
        reason: Human-readable description of the failure.
        status_code: HTTP status code when the failure was an HTTP status.
    """

    reason: str
    status_code: int | None = None
    found: ClassVar[bool] = False


SnapshotResult = Union[Found, NotFound, RequestFailed]
"""Outcome of a single resolution. Exactly one is produced per query."""
