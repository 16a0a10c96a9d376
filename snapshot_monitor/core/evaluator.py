"""Threshold evaluation for snapshot age."""

from datetime import timedelta

from .models import CheckResult, Verdict
from ..utils.formatters import format_duration


def classify(age: timedelta, warning: timedelta, critical: timedelta) -> Verdict:
    """Classify a snapshot age against the warning and critical thresholds.

    An age equal to a threshold does not trigger that state.

    Args:
        age: Age of the newest snapshot, non-negative.
        warning: Warning threshold, non-negative.
        critical: Critical threshold, non-negative.

    Returns:
        The resulting verdict.
    """
    if age > critical:
        return Verdict.CRITICAL
    elif age > warning:
        return Verdict.WARNING
    else:
        return Verdict.OK


def evaluate(age: timedelta, warning: timedelta, critical: timedelta) -> CheckResult:
    """Classify a snapshot age and attach the age message."""
    verdict = classify(age, warning, critical)
    return CheckResult(verdict, f"latest snapshot created {format_duration(age)} ago")
