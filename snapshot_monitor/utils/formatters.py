"""Formatting utilities for snapshot monitor output."""

import re
from datetime import timedelta
from typing import Union

from ..core.models import CheckResult


_DURATION_UNITS = {
    'ns': 0.001,
    'us': 1,
    'µs': 1,
    'μs': 1,
    'ms': 1000,
    's': 1000000,
    'm': 60 * 1000000,
    'h': 3600 * 1000000,
}

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)')


def parse_duration(value: Union[str, int, float]) -> timedelta:
    """Parse a duration such as ``24h``, ``1h30m`` or ``90s``.

    Plain numbers (as they come out of a YAML file) are taken as seconds.

    Args:
        value: Duration string or number of seconds.

    Returns:
        Parsed duration, possibly negative.

    Raises:
        ValueError: If the value is not a valid duration.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return timedelta(seconds=value)
        except OverflowError:
            raise ValueError(f"duration out of range: {value!r}")

    text = str(value).strip()
    sign = 1
    if text[:1] in ('+', '-'):
        sign = -1 if text[0] == '-' else 1
        text = text[1:]

    if text == '0':
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    microseconds = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match:
            raise ValueError(f"invalid duration: {value!r}")
        microseconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    try:
        return timedelta(microseconds=sign * microseconds)
    except OverflowError:
        raise ValueError(f"duration out of range: {value!r}")


def format_duration(delta: timedelta) -> str:
    """Format a duration rounded to whole seconds, e.g. ``1h0m0s``.

    Args:
        delta: Duration to format.

    Returns:
        Duration string in hours, minutes and seconds.
    """
    total_us = (delta.days * 86400 + delta.seconds) * 1000000 + delta.microseconds
    negative = total_us < 0
    # Halves round away from zero
    seconds = (abs(total_us) + 500000) // 1000000

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        text = f"{hours}h{minutes}m{secs}s"
    elif minutes:
        text = f"{minutes}m{secs}s"
    else:
        text = f"{secs}s"

    return f"-{text}" if negative and seconds else text


def format_result(result: CheckResult) -> str:
    """Format a check result as the single plugin output line."""
    return f"{result.verdict.name}: {result.message}"
