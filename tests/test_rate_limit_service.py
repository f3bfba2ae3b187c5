from datetime import datetime, timedelta

from app.models.verification import Verification
from app.services.rate_limit_service import evaluate_rate_limit

NOW = datetime(2024, 5, 1, 12, 0, 0)


def make(version: int, minutes_ago: float) -> Verification:
    return Verification(
        phone="+16502530000",
        version=version,
        secret_key=b"secret",
        created=NOW - timedelta(minutes=minutes_ago),
    )


def test_no_history_is_allowed():
    decision = evaluate_rate_limit([], max_attempts=3, window_minutes=60, now=NOW)
    assert decision.allowed
    assert decision.recent_count == 0


def test_below_limit_is_allowed():
    recent = [make(2, 5), make(1, 30)]
    decision = evaluate_rate_limit(recent, max_attempts=3, window_minutes=60, now=NOW)
    assert decision.allowed
    assert decision.recent_count == 2


def test_reaching_limit_is_denied():
    recent = [make(3, 1), make(2, 10), make(1, 59)]
    decision = evaluate_rate_limit(recent, max_attempts=3, window_minutes=60, now=NOW)
    assert not decision.allowed
    assert decision.reason == "RateLimitExceeded"
    assert decision.recent_count == 3


def test_records_outside_window_do_not_count():
    recent = [make(4, 2), make(3, 61), make(2, 120), make(1, 600)]
    decision = evaluate_rate_limit(recent, max_attempts=3, window_minutes=60, now=NOW)
    assert decision.allowed
    assert decision.recent_count == 1


def test_many_recent_records_are_denied():
    recent = [make(version, 0) for version in range(20, 10, -1)]
    decision = evaluate_rate_limit(recent, max_attempts=3, window_minutes=60, now=NOW)
    assert not decision.allowed
    assert decision.recent_count == 10
