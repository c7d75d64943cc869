"""Configuration constants for Wayback Machine snapshot resolution.

Defines the Availability API endpoint, date formats and request defaults
used by :class:`~snapshot_resolver.wayback.resolver.SnapshotResolver`.
The runtime-tunable values are surfaced through
:class:`~snapshot_resolver.config.settings.Settings`.

Reference: https://archive.org/help/wayback_api.php
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# API constants
# ---------------------------------------------------------------------------

WB_AVAILABILITY_URL: str = "https://archive.org/wayback/available"
"""URL for the Wayback Machine Availability API.

Returns the closest archived snapshot for a URL as a JSON object of the form
``{"archived_snapshots": {"closest": {"url": ..., "timestamp": ...}}}``.
"""

WB_RANGE_DATE_FORMAT: str = "%Y%m%d"
"""Format of the ``from`` / ``to`` range bounds sent to the endpoint."""

WB_TIMESTAMP_FORMAT: str = "%Y%m%d%H%M%S"
"""Format of snapshot timestamps returned by the endpoint (14 digits)."""

WB_ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https"})
"""URI schemes accepted for ``target_url``."""

# ---------------------------------------------------------------------------
# Request defaults
# ---------------------------------------------------------------------------

WB_DEFAULT_TIMEOUT: float = 30.0
"""Default request timeout in seconds."""

WB_DEFAULT_USER_AGENT: str = "SnapshotResolver/1.0 (+research use)"
"""Default ``User-Agent`` header."""

WB_HEALTH_CHECK_URL: str = "http://example.com"
"""Target URL looked up by ``health_check()``; known to be archived."""
