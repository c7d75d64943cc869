"""Low-level Wayback Machine Availability API helpers.

Internal module used by
:class:`~snapshot_resolver.wayback.resolver.SnapshotResolver`.
Not part of the public API.

Provides:
- :func:`build_params` — validate a query and build the request parameters.
- :func:`fetch_availability` / :func:`afetch_availability` — issue one
  lookup request and decode the JSON payload.
- :func:`validate_endpoint_url`, :func:`validate_target_url` — URL checks.
- :func:`extract_closest` — pull the closest-match record out of a payload.
- :func:`parse_range_bound`, :func:`format_range_bound`,
  :func:`parse_wb_timestamp` — date conversions.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import httpx

from snapshot_resolver.core.exceptions import ArchiveRequestError, InvalidInputError
from snapshot_resolver.wayback.config import (
    WB_ALLOWED_SCHEMES,
    WB_RANGE_DATE_FORMAT,
    WB_TIMESTAMP_FORMAT,
)

if TYPE_CHECKING:
    from snapshot_resolver.wayback.models import SnapshotQuery

logger = logging.getLogger(__name__)

# strptime accepts 1-digit month and day fields, so the shape is checked first.
_RANGE_INPUT_FORMATS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\d{8}", re.ASCII), WB_RANGE_DATE_FORMAT),
    (re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII), "%Y-%m-%d"),
)


def validate_endpoint_url(endpoint: str) -> str:
    """Return *endpoint* if it is an absolute ``https`` URL.

    Clients do not follow redirects, and the archive answers plain ``http``
    with a 301 to ``https``, so other schemes would only ever fail.

    Raises:
        ValueError: If *endpoint* is not an ``https`` URL with a host.
    """
    parsed = urlparse(endpoint)
    if parsed.scheme.lower() != "https" or not parsed.hostname:
        raise ValueError(f"availability_url must be an absolute https URL, got {endpoint!r}")
    return endpoint

def validate_target_url(target_url: Any) -> str:
    """Return *target_url* stripped of surrounding whitespace if it is usable.

    A usable URL is a non-empty string with an ``http`` or ``https`` scheme
    and a host.

    Raises:
        InvalidInputError: If the URL is missing or malformed.
    """
    if not isinstance(target_url, str) or not target_url.strip():
        raise InvalidInputError("target_url must be a non-empty string", field="target_url")
    candidate = target_url.strip()
    if any(ch.isspace() for ch in candidate):
        raise InvalidInputError(
            f"target_url contains whitespace: {target_url!r}", field="target_url"
        )
    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
        parsed.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise InvalidInputError(
            f"target_url is not a valid URI: {target_url!r} ({exc})", field="target_url"
        ) from exc
    if parsed.scheme.lower() not in WB_ALLOWED_SCHEMES:
        raise InvalidInputError(
            f"target_url must be an absolute http(s) URI, got {target_url!r}",
            field="target_url",
        )
    if not hostname:
        raise InvalidInputError(
            f"target_url has no host: {target_url!r}", field="target_url"
        )
    return candidate


def parse_range_bound(value: Any, field: str) -> date:
    """Parse a time-range bound into a :class:`~datetime.date`.

    Accepts ``date`` / ``datetime`` objects and strings in ``YYYYMMDD`` or
    ``YYYY-MM-DD`` form.

    Args:
        value: The raw bound.
        field: Field name reported in the error (``"start"`` or ``"end"``).

    Raises:
        InvalidInputError: If *value* is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        for shape, fmt in _RANGE_INPUT_FORMATS:
            if not shape.fullmatch(candidate):
                continue
            try:
                return datetime.strptime(candidate, fmt).date()
            except ValueError:
                break
    raise InvalidInputError(
        f"time_range.{field} must be a calendar date in YYYYMMDD form, got {value!r}",
        field=f"time_range.{field}",
    )


def format_range_bound(value: date) -> str:
    """Format a range bound for the ``from`` / ``to`` parameters (``YYYYMMDD``)."""
    return value.strftime(WB_RANGE_DATE_FORMAT)


def parse_wb_timestamp(timestamp: str | None) -> datetime | None:
    """Parse a Wayback Machine timestamp to a UTC ``datetime``.

    Args:
        timestamp: Raw 14-digit ``timestamp`` field value.

    Returns:
        Timezone-aware ``datetime`` in UTC, or ``None`` when unparseable.
    """
    if not timestamp:
        return None
    try:
        return datetime.strptime(timestamp, WB_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        logger.debug("wayback: could not parse timestamp '%s'", timestamp)
        return None


def build_params(query: SnapshotQuery) -> dict[str, str]:
    """Validate *query* and build the Availability API query parameters.

    Args:
        query: The snapshot query to validate.

    Returns:
        Dict with ``url`` and, when a range is given, ``from`` and ``to``.

    Raises:
        InvalidInputError: On a malformed URL or date range.
    """
    params: dict[str, str] = {"url": validate_target_url(query.target_url)}

    if query.time_range is not None:
        start = parse_range_bound(query.time_range.start, "start")
        end = parse_range_bound(query.time_range.end, "end")
        if start > end:
            raise InvalidInputError(
                f"time_range.start ({start.isoformat()}) is after "
                f"time_range.end ({end.isoformat()})",
                field="time_range",
            )
        params["from"] = format_range_bound(start)
        params["to"] = format_range_bound(end)

    return params


def _decode_response(response: httpx.Response) -> dict[str, Any]:
    """Check the status of *response* and decode its JSON object body.

    Raises:
        ArchiveRequestError: On a non-success status or a non-object body.
    """
    if not response.is_success:
        raise ArchiveRequestError(
            f"wayback: availability endpoint returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise ArchiveRequestError(f"wayback: invalid JSON payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise ArchiveRequestError(
            f"wayback: invalid JSON payload: expected an object, got {type(payload).__name__}"
        )
    return payload


def fetch_availability(
    client: httpx.Client,
    endpoint: str,
    params: dict[str, str],
) -> dict[str, Any]:
    """Issue one availability lookup and return the decoded payload.

    Args:
        client: HTTP client carrying the timeout and headers.
        endpoint: Availability API URL.
        params: Query parameters from :func:`build_params`.

    Raises:
        ArchiveRequestError: On transport errors, non-success statuses and
            undecodable payloads.
    """
    try:
        response = client.get(endpoint, params=params)
    except httpx.TimeoutException as exc:
        raise ArchiveRequestError(f"wayback: request timed out: {exc}") from exc
    except httpx.RequestError as exc:
        raise ArchiveRequestError(f"wayback: request error: {exc}") from exc
    return _decode_response(response)


async def afetch_availability(
    client: httpx.AsyncClient,
    endpoint: str,
    params: dict[str, str],
) -> dict[str, Any]:
    """Async twin of :func:`fetch_availability`."""
    try:
        response = await client.get(endpoint, params=params)
    except httpx.TimeoutException as exc:
        raise ArchiveRequestError(f"wayback: request timed out: {exc}") from exc
    except httpx.RequestError as exc:
        raise ArchiveRequestError(f"wayback: request error: {exc}") from exc
    return _decode_response(response)


def extract_closest(payload: dict[str, Any]) -> dict[str, Any] | None:
    """Return the ``archived_snapshots.closest`` record, or ``None``.

    A record counts only if it has non-empty ``url`` and ``timestamp``
    fields and is not flagged ``"available": false``.
    """
    snapshots = payload.get("archived_snapshots")
    if not isinstance(snapshots, dict):
        return None
    closest = snapshots.get("closest")
    if not isinstance(closest, dict):
        return None
    if closest.get("available") is False:
        return None
    if not closest.get("url") or not closest.get("timestamp"):
        return None
    return closest
