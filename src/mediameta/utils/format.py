"""Human-readable formatting of sizes, durations and rates."""

import math
from enum import Enum
from typing import Optional


class SizeBase(Enum):
    """Unit system for human-readable file sizes."""

    BASE2 = 1024  # IEC
    BASE10 = 1000  # SI


_UNITS = {
    SizeBase.BASE2: ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB"],
    SizeBase.BASE10: ["KB", "MB", "GB", "TB", "PB", "EB", "ZB"],
}


def _round_up(value: float, precision: int) -> float:
    multiplier = 10**precision
    return math.ceil(value * multiplier) / multiplier


def human_size(size_bytes: int, base: SizeBase) -> str:
    """Format a byte count, e.g. 1536 -> "1.50KiB" (base 2) or "1.54KB" (base 10).

    Values are rounded up, with 2, 1 or 0 decimal places for values below
    10, 100 or the unit multiplier respectively.
    """
    multiplier = base.value
    units = _UNITS[base]
    size = float(size_bytes)
    if size < multiplier:
        return f"{size:.0f}B"
    for unit in units:
        size /= multiplier
        if size < multiplier:
            if size < 10:
                precision = 2
            elif size < 100:
                precision = 1
            else:
                precision = 0
            return f"{_round_up(size, precision):.{precision}f}{unit}"
    return f"{math.ceil(size):.0f}{units[-1]}"


def format_seconds(seconds: float) -> str:
    """Format seconds as HH:MM:SS.ss."""
    secs = seconds % 60
    minutes = math.floor(seconds / 60) % 60
    hours = math.floor(seconds / 3600)
    return f"{hours:02d}:{minutes:02d}:{secs:05.2f}"


def format_bit_rate(bits_per_second: Optional[float]) -> Optional[str]:
    """Format bits/second as kb/s with no decimals; 0 or None means unknown."""
    if not bits_per_second:
        return None
    return f"{bits_per_second / 1000:.0f} kb/s"
