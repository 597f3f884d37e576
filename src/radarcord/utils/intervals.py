"""Named autopost intervals.

Radarcord asks bots not to post more often than every two minutes; the
presets give progressively more conservative periods.
"""

from __future__ import annotations

from enum import Enum, StrEnum


class OverlapPolicy(StrEnum):
    """What a repeating poster does when a tick fires while the last one runs."""

    # Launch every tick independently, ticks may overlap
    ALLOW_CONCURRENT = "allow_concurrent"
    # Skip the tick while the previous one is still in flight
    SKIP_IF_BUSY = "skip_if_busy"


class IntervalPreset(Enum):
    """Repeat periods for autoposting, in seconds."""

    DEFAULT = 120
    SAFE = 180
    SUPER_SAFE = 240
    EXTRA_SAFE = 300
    # The most safe you could be.
    SUPER_OMEGA_SAFE = 600

    @property
    def seconds(self) -> int:
        """Period of the preset in seconds."""
        return self.value

    @classmethod
    def from_name(cls, name: str) -> IntervalPreset:
        """Look a preset up by name, ignoring case and separators.

        Accepts ``"super_safe"``, ``"SuperSafe"`` and ``"super-safe"``.

        Raises:
            ValueError: If no preset has that name
        """
        normalized = name.replace("-", "").replace("_", "").replace(" ", "").upper()
        for preset in cls:
            if preset.name.replace("_", "") == normalized:
                return preset
        msg = f"Unknown interval preset: {name!r} (expected one of {', '.join(p.name for p in cls)})"
        raise ValueError(msg)


def get_timeout(interval: IntervalPreset) -> int:
    """Map a preset to its period in seconds.

    Raises:
        TypeError: If interval is not an IntervalPreset
    """
    if not isinstance(interval, IntervalPreset):  # pyright: ignore[reportUnnecessaryIsInstance]
        raise TypeError(f"Expected an IntervalPreset, got {type(interval).__name__} instead.")
    return interval.seconds


def resolve_interval(interval: IntervalPreset | float) -> float:
    """Turn a preset or raw number of seconds into a period in seconds.

    Raises:
        TypeError: If interval is neither a preset nor a number
        ValueError: If the period is not positive
    """
    if isinstance(interval, IntervalPreset):
        return float(get_timeout(interval))
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):  # pyright: ignore[reportUnnecessaryIsInstance]
        raise TypeError(f"Expected an IntervalPreset or seconds, got {type(interval).__name__} instead.")
    if interval <= 0:
        raise ValueError(f"Interval must be positive, got {interval}")
    return float(interval)
