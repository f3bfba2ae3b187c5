import asyncio

import pytest

from app.core.exceptions import InvalidPhoneError, PersistenceError, RateLimitExceededError
from app.services.issuance_service import start_verification
from tests.fakes import InMemoryVerificationRepository, RecordingSmsSender, PHONE
from utils.otp_utils import compute_hotp


class UnreachableRepository(InMemoryVerificationRepository):
    async def get_recent_verifications(self, phone, limit):
        raise PersistenceError()


def test_concurrent_requests_for_new_phone(test_settings):
    repo = InMemoryVerificationRepository()
    sender = RecordingSmsSender()

    async def race():
        return await asyncio.gather(
            start_verification(PHONE, repo, sender, test_settings),
            start_verification("+1 650-253-0000", repo, sender, test_settings),
        )

    first, second = asyncio.run(race())

    assert first.id == second.id
    assert [v.version for v in repo.versions(PHONE)] == [1]
    assert repo.inserts == 1

    code = compute_hotp(repo.records[(PHONE, 1)].secret_key, 1)
    assert sender.messages == [(PHONE, f"Your code is: {code}")] * 2


def test_invalid_phone_touches_nothing(test_settings):
    repo = InMemoryVerificationRepository()
    sender = RecordingSmsSender()

    with pytest.raises(InvalidPhoneError):
        asyncio.run(start_verification("not a phone", repo, sender, test_settings))

    assert repo.records == {}
    assert sender.messages == []


def test_rate_limit_uses_configured_maximum(test_settings):
    repo = InMemoryVerificationRepository()
    sender = RecordingSmsSender()
    repo.seed(PHONE, 1, age_minutes=10)
    config = test_settings.model_copy(update={"MAX_ATTEMPTS": 1})

    with pytest.raises(RateLimitExceededError):
        asyncio.run(start_verification(PHONE, repo, sender, config))

    assert repo.inserts == 0
    assert sender.messages == []


def test_custom_digits_and_template(test_settings):
    repo = InMemoryVerificationRepository()
    sender = RecordingSmsSender()
    config = test_settings.model_copy(update={"OTP_DIGITS": 8, "SMS_MESSAGE_TEMPLATE": "{code} is your code"})

    asyncio.run(start_verification(PHONE, repo, sender, config))

    code = compute_hotp(repo.records[(PHONE, 1)].secret_key, 1, digits=8)
    assert sender.messages == [(PHONE, f"{code} is your code")]


def test_store_failure_is_persistence_error(test_settings):
    sender = RecordingSmsSender()

    with pytest.raises(PersistenceError):
        asyncio.run(start_verification(PHONE, UnreachableRepository(), sender, test_settings))

    assert sender.messages == []
