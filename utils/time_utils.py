"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Verification expiry checks
- Trailing window checks for rate limiting

All timestamps are naive UTC, matching what MongoDB returns.
"""

from datetime import datetime, timedelta
from typing import Optional


def utcnow() -> datetime:
    """
    Current time as naive UTC, truncated to milliseconds (BSON precision).
    """
    now = datetime.utcnow()
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def calculate_expiry(created: datetime, validity_minutes: int) -> datetime:
    """
    Calculates when a verification stops being valid.
    """
    return created + timedelta(minutes=validity_minutes)


def is_expired(created: datetime, validity_minutes: int, now: Optional[datetime] = None) -> bool:
    """
    Checks if a verification created at `created` has passed its validity window.
    """
    now = now or utcnow()
    return now > calculate_expiry(created, validity_minutes)


def is_within_window(timestamp: datetime, window_minutes: int, now: Optional[datetime] = None) -> bool:
    """
    Checks if `timestamp` falls inside the trailing window ending at `now`.
    """
    now = now or utcnow()
    return timestamp >= now - timedelta(minutes=window_minutes)
