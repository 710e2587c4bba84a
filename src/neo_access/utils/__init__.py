"""Utility helpers for neo-access."""

from .datetime import Clock, parse_iso, to_iso, to_utc, utc_now

__all__ = [
    "Clock",
    "parse_iso",
    "to_iso",
    "to_utc",
    "utc_now",
]
