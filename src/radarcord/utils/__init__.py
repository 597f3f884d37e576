"""Shared utility modules.

This package provides:
- HTTP status helpers
- Autopost interval presets
- The aiohttp-backed HTTP client
- Secret sanitization and logging setup

Nothing in here knows about a specific bot framework.
"""

from radarcord.utils.intervals import IntervalPreset, OverlapPolicy, get_timeout, resolve_interval
from radarcord.utils.status import is_ok

__all__ = [
    "IntervalPreset",
    "OverlapPolicy",
    "get_timeout",
    "is_ok",
    "resolve_interval",
]
