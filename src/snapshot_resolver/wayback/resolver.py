"""Wayback Machine snapshot resolver.

Resolves a target URL, optionally constrained to an inclusive date range, to
the closest archived snapshot via the Internet Archive's Availability API.

**Design notes**:

- One query, one outbound request, one :data:`SnapshotResult`. No retries,
  no caching.
- Malformed queries raise
  :class:`~snapshot_resolver.core.exceptions.InvalidInputError` before any
  I/O. Transport and HTTP failures never raise; they come back as
  :class:`~snapshot_resolver.wayback.models.RequestFailed`.
- ``resolve()`` is synchronous; ``aresolve()`` is the ``asyncio`` twin for
  callers that fan out over many URLs.
- An ``httpx`` client can be injected for connection reuse or testing. An
  injected client is never closed by the resolver.
- Low-level HTTP and date helpers live in :mod:`._fetcher`.
"""

from __future__ import annotations

import contextlib
import logging
import math
from collections.abc import AsyncIterator, Iterator
from datetime import date, datetime, timezone
from typing import Any

import httpx
import structlog

from snapshot_resolver.config.settings import get_settings
from snapshot_resolver.core.exceptions import ArchiveRequestError, InvalidInputError
from snapshot_resolver.wayback._fetcher import (
    afetch_availability,
    build_params,
    extract_closest,
    fetch_availability,
    validate_endpoint_url,
)
from snapshot_resolver.wayback.config import WB_HEALTH_CHECK_URL
from snapshot_resolver.wayback.models import (
    Found,
    NotFound,
    RequestFailed,
    SnapshotQuery,
    SnapshotResult,
    TimeRange,
)

logger = logging.getLogger(__name__)


class SnapshotResolver:
    """Looks up the closest archived snapshot of a URL.

    The resolver holds only immutable configuration, so one instance can be
    shared freely, including across threads and tasks.

    Args:
        availability_url: Endpoint override. Defaults to
            ``Settings.availability_url``. Must be ``https``.
        timeout: Request timeout in seconds. Defaults to
            ``Settings.request_timeout``.
        user_agent: ``User-Agent`` header. Defaults to ``Settings.user_agent``.
        http_client: Optional injected :class:`httpx.Client` used by
            :meth:`resolve`.
        async_http_client: Optional injected :class:`httpx.AsyncClient` used
            by :meth:`aresolve`.

    Raises:
        ValueError: If the endpoint is not ``https`` or the timeout is not a
            finite positive number.
    """

    def __init__(
        self,
        availability_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        http_client: httpx.Client | None = None,
        async_http_client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.availability_url = validate_endpoint_url(
            availability_url or settings.availability_url
        )
        self.timeout = timeout if timeout is not None else settings.request_timeout
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            raise ValueError(f"timeout must be a positive number, got {self.timeout}")
        self.user_agent = user_agent or settings.user_agent
        self._http_client = http_client
        self._async_http_client = async_http_client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, query: SnapshotQuery) -> SnapshotResult:
        """Resolve *query* to the closest archived snapshot.

        Args:
            query: The lookup to perform.

        Returns:
            :class:`Found`, :class:`NotFound` or :class:`RequestFailed`.

        Raises:
            InvalidInputError: If the URL or date range is malformed. Raised
                before any network call.
        """
        params = build_params(query)
        with structlog.contextvars.bound_contextvars(target_url=params["url"]):
            try:
                with self._client() as client:
                    payload = fetch_availability(client, self.availability_url, params)
            except ArchiveRequestError as exc:
                return self._failed(exc)
            return self._interpret(payload, params["url"])

    async def aresolve(self, query: SnapshotQuery) -> SnapshotResult:
        """Async twin of :meth:`resolve`."""
        params = build_params(query)
        with structlog.contextvars.bound_contextvars(target_url=params["url"]):
            try:
                async with self._async_client() as client:
                    payload = await afetch_availability(
                        client, self.availability_url, params
                    )
            except ArchiveRequestError as exc:
                return self._failed(exc)
            return self._interpret(payload, params["url"])

    def resolve_url(
        self,
        target_url: str,
        start: date | str | None = None,
        end: date | str | None = None,
    ) -> SnapshotResult:
        """Build a :class:`SnapshotQuery` and resolve it.

        Both *start* and *end* must be given to constrain the lookup; giving
        only one is an error.

        Raises:
            InvalidInputError: On a malformed URL or date range.
        """
        return self.resolve(make_query(target_url, start, end))

    def health_check(self) -> dict[str, Any]:
        """Verify the availability endpoint answers a lookup.

        Looks up :data:`~snapshot_resolver.wayback.config.WB_HEALTH_CHECK_URL`.
        Never raises.

        Returns:
            Dict with ``status`` (``"ok"`` | ``"degraded"`` | ``"down"``),
            ``endpoint``, ``checked_at``, and optionally ``detail``.
        """
        base: dict[str, Any] = {
            "endpoint": self.availability_url,
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }
        result = self.resolve(SnapshotQuery(target_url=WB_HEALTH_CHECK_URL))

        if isinstance(result, Found):
            return {**base, "status": "ok"}
        if isinstance(result, NotFound):
            return {
                **base,
                "status": "degraded",
                "detail": f"No snapshot returned for {WB_HEALTH_CHECK_URL}",
            }
        status = (
            "degraded"
            if result.status_code is not None and result.status_code < 500
            else "down"
        )
        return {**base, "status": status, "detail": result.reason}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}

    @contextlib.contextmanager
    def _client(self) -> Iterator[httpx.Client]:
        """Yield the injected client, or a fresh one closed on exit."""
        if self._http_client is not None:
            yield self._http_client
            return
        with httpx.Client(timeout=self.timeout, headers=self._headers()) as client:
            yield client

    @contextlib.asynccontextmanager
    async def _async_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected async client, or a fresh one closed on exit."""
        if self._async_http_client is not None:
            yield self._async_http_client
            return
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers()
        ) as client:
            yield client

    @staticmethod
    def _interpret(payload: dict[str, Any], target_url: str) -> SnapshotResult:
        closest = extract_closest(payload)
        if closest is None:
            logger.info("wayback: no snapshot for %s", target_url)
            return NotFound(target_url=target_url)

        status = closest.get("status")
        found = Found(
            snapshot_url=str(closest["url"]),
            timestamp=str(closest["timestamp"]),
            status=str(status) if status is not None else None,
        )
        logger.info(
            "wayback: resolved %s -> %s (%s)",
            target_url,
            found.snapshot_url,
            found.timestamp,
        )
        return found

    @staticmethod
    def _failed(exc: ArchiveRequestError) -> RequestFailed:
        logger.warning("%s", exc)
        return RequestFailed(reason=str(exc), status_code=exc.status_code)


def make_query(
    target_url: str,
    start: date | str | None = None,
    end: date | str | None = None,
) -> SnapshotQuery:
    """Build a :class:`SnapshotQuery` from a URL and optional range bounds.

    Raises:
        InvalidInputError: If exactly one of *start* / *end* is given.
    """
    if (start is None) != (end is None):
        raise InvalidInputError(
            "time_range needs both a start and an end", field="time_range"
        )
    time_range = None
    if start is not None and end is not None:
        time_range = TimeRange(start=start, end=end)
    return SnapshotQuery(target_url=target_url, time_range=time_range)
