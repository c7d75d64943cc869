"""Configuration package for the snapshot resolver."""

from __future__ import annotations

from snapshot_resolver.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
