"""Utility modules for snapshot monitoring."""

from .formatters import parse_duration, format_duration, format_result

__all__ = ["parse_duration", "format_duration", "format_result"]
