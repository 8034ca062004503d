"""Utility modules for ttimeline.

This package provides utility functions for time parsing and formatting.

Modules:
    time_utils: Date/time validation, parsing and formatting utilities
"""
from utils.time_utils import (
    add_days,
    format_duration,
    minutes_to_time,
    parse_clock_time,
    parse_deadline,
    parse_iso_date,
    time_to_minutes,
)

__all__ = [
    "add_days",
    "format_duration",
    "minutes_to_time",
    "parse_clock_time",
    "parse_deadline",
    "parse_iso_date",
    "time_to_minutes",
]
