"""
Utilities package for fusion-model.

Exports shared helpers for logging and numeric conveniences.
Keep this package lightweight and free of serialization logic.
"""

from fusion_model.utils.logging import configure_logging, get_logger
from fusion_model.utils.numbers import clamp_high, clamp_low, clamp_range, readable_bytes

__all__ = [
    "configure_logging",
    "get_logger",
    "clamp_low",
    "clamp_high",
    "clamp_range",
    "readable_bytes",
]
