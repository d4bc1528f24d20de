from __future__ import annotations

import math


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"


def _checked(value: float, name: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")
    return max(0.0, value)


def format_duration(seconds: float) -> str:
    """Render seconds as "1 hour 30 mins", "1 hour" or "25 mins".

    Negative values clamp to zero; NaN and infinity raise ValueError.
    """
    total = int(_checked(seconds, "seconds"))
    hours = total // 3600
    minutes = (total % 3600) // 60
    if hours > 0:
        text = _plural(hours, "hour")
        if minutes > 0:
            text += " " + _plural(minutes, "min")
        return text
    return _plural(minutes, "min")


def format_distance(meters: float) -> str:
    """Render meters as "1.5 km" from 1000 m upwards, otherwise "500 m"."""
    value = _checked(meters, "meters")
    whole = int(math.floor(value + 0.5))
    if whole >= 1000:
        return f"{value / 1000:.1f} km"
    return f"{whole} m"


__all__ = ["format_distance", "format_duration"]
