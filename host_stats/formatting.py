"""Helpers that turn raw byte counts and ratios into display strings."""
from __future__ import annotations

import math
import struct

KB = 1024
MB = KB * 1024
GB = MB * 1024
TB = GB * 1024

# Largest unit first; the first threshold the value reaches wins.
_UNITS = (
    (TB, "TB"),
    (GB, "GB"),
    (MB, "MB"),
    (KB, "KB"),
)


def _as_float32(value: float) -> float:
    """Round ``value`` to the nearest single-precision float."""
    return struct.unpack("f", struct.pack("f", value))[0]


def format_bytes(num_bytes: int) -> str:
    """Render ``num_bytes`` with binary units, e.g. ``1536 -> "1.50 KB"``."""
    for threshold, unit in _UNITS:
        if num_bytes >= threshold:
            return f"{num_bytes / threshold:.2f} {unit}"
    return f"{num_bytes} B"


def format_percentage(value: float) -> str:
    if not math.isfinite(value):
        return "0.00%"
    return f"{value:.2f}%"


def usage_percentage(used: int, total: int) -> float:
    """Share of ``total`` taken by ``used``; ``0.0`` when nothing is reported."""
    if total <= 0:
        return 0.0
    return _as_float32(_as_float32(used) / _as_float32(total) * 100.0)


def used_percentage_from_available(available: int, total: int) -> float:
    """Percentage in use given the free amount, as disks report it."""
    if total <= 0:
        return 0.0
    return _as_float32(100.0 - usage_percentage(available, total))
