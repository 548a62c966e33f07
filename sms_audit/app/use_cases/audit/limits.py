"""Clamping rules for query parameters on the audit admin surface."""

from datetime import UTC, datetime
from typing import Optional

LIST_DEFAULT_LIMIT = 50
LIST_MAX_LIMIT = 500

SUMMARY_DEFAULT_DAYS = 7
USER_HISTORY_DEFAULT_DAYS = 30
USER_HISTORY_DEFAULT_LIMIT = 100
USER_HISTORY_MAX_LIMIT = 500
MAX_WINDOW_DAYS = 365

CLEANUP_DEFAULT_DAYS = 365
CLEANUP_MIN_RETENTION_DAYS = 30

EXPORT_MAX_ROWS = 10_000

HIGH_RISK_THRESHOLD = 50
NOTABLE_RISK_THRESHOLD = 30
TOP_N = 10


def clamp(value: Optional[int], low: int, high: int, default: int) -> int:
    if value is None:
        return default
    return max(low, min(high, value))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)
