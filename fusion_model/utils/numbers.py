"""
Numeric convenience helpers: range clamping and human-readable byte sizes.
"""

from __future__ import annotations

from typing import TypeVar, Union

Number = TypeVar("Number", int, float)

_KB = 1024
_MB = 1024 * 1024
_GB = 1024 * 1024 * 1024


def clamp_low(value: Number, low: Number) -> Number:
    """Return `low` if `value` is below it, otherwise `value`."""
    return low if value < low else value


def clamp_high(value: Number, high: Number) -> Number:
    """Return `high` if `value` is above it, otherwise `value`."""
    return high if value > high else value


def clamp_range(value: Number, low: Number, high: Number) -> Number:
    """
    Clamp `value` to the closed range [low, high].

    Raises
    ------
    ValueError
        If `low` is greater than `high`.
    """
    if low > high:
        raise ValueError(f"Invalid range: low ({low}) is greater than high ({high})")
    if value < low:
        return low
    if value > high:
        return high
    return value


def readable_bytes(size: int) -> str:
    """
    Render a byte count as B, KB, MB or GB using 1024-based units.

    >>> readable_bytes(512)
    '512 B'
    >>> readable_bytes(1536)
    '1.50 KB'
    """
    if size < _KB:
        return f"{size} B"
    unit: Union[int, float]
    if size < _MB:
        unit, suffix = _KB, "KB"
    elif size < _GB:
        unit, suffix = _MB, "MB"
    else:
        unit, suffix = _GB, "GB"
    return f"{size / unit:.2f} {suffix}"


__all__ = ["clamp_low", "clamp_high", "clamp_range", "readable_bytes"]
