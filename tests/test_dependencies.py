import asyncio

import pytest

from app.api.dependencies import get_sender, get_verification_repository
from app.core.config import Settings
from app.core.exceptions import DeliveryError
from app.services.sms_service import ConsoleSmsSender, TwilioSmsSender, UnconfiguredSmsSender


def twilio_settings(**overrides):
    values = dict(
        SMS_PROVIDER="twilio",
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="token",
        TWILIO_FROM_NUMBER="+15005550006",
    )
    values.update(overrides)
    return Settings(**values)


def test_repository_uses_injected_settings():
    repo = get_verification_repository(Settings(SECRET_KEY_BYTES=32))
    assert repo.secret_key_bytes == 32


def test_console_sender_from_injected_settings():
    assert isinstance(get_sender(Settings(SMS_PROVIDER="console")), ConsoleSmsSender)


def test_twilio_sender_from_injected_settings():
    sender = get_sender(twilio_settings())

    assert isinstance(sender, TwilioSmsSender)
    assert sender.from_number == "+15005550006"
    assert sender.base_url.endswith("/Accounts/AC123")


@pytest.mark.parametrize("missing", ["TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_FROM_NUMBER"])
def test_missing_twilio_credentials_do_not_raise(missing):
    sender = get_sender(twilio_settings(**{missing: None}))
    assert isinstance(sender, UnconfiguredSmsSender)


def test_unconfigured_sender_fails_on_send():
    with pytest.raises(DeliveryError) as exc_info:
        asyncio.run(UnconfiguredSmsSender("twilio").send("+16502530000", "Your code is: 123456"))

    assert exc_info.value.message == "Could not deliver verification code"
