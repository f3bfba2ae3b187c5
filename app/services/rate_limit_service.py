"""
app/services/rate_limit_service.py

Purpose: Issuance rate limiting

- Counts verification records created inside the trailing window
- Decides whether a new code may be issued for the phone

Counts stored records, not deliveries, so requests that reuse a pending
code still consume the budget.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from app.core.logging import get_logger
from app.models.verification import Verification
from utils.time_utils import is_within_window, utcnow

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    recent_count: int
    limit: int
    reason: Optional[str] = None


def evaluate_rate_limit(
    recent: Sequence[Verification],
    max_attempts: int,
    window_minutes: int,
    now: Optional[datetime] = None
) -> RateLimitDecision:
    """
    Evaluates the rate limit for one phone.

    Args:
        recent: Most recent verifications for the phone, newest first
        max_attempts: Records allowed inside the window
        window_minutes: Trailing window length
        now: Evaluation time (defaults to current UTC)

    Returns:
        RateLimitDecision; `allowed` is False once the count reaches max_attempts
    """
    now = now or utcnow()

    recent_count = sum(
        1 for verification in recent
        if is_within_window(verification.created, window_minutes, now)
    )

    if recent_count >= max_attempts:
        logger.warning(
            f"Rate limit reached: {recent_count} verifications in the last {window_minutes} minutes (limit {max_attempts})"
        )
        return RateLimitDecision(
            allowed=False,
            recent_count=recent_count,
            limit=max_attempts,
            reason="RateLimitExceeded"
        )

    return RateLimitDecision(allowed=True, recent_count=recent_count, limit=max_attempts)
