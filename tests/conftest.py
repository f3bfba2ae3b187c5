import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_settings, get_verification_repository, get_sender
from app.core.config import Settings
from app.main import app
from tests.fakes import InMemoryVerificationRepository, RecordingSmsSender


@pytest.fixture
def test_settings():
    return Settings(
        MAX_ATTEMPTS=3,
        RATE_LIMIT_WINDOW_MINUTES=60,
        RATE_LIMIT_LOOKBACK=10,
        VERIFICATION_VALIDITY_MINUTES=3,
        OTP_DIGITS=6,
        SMS_MESSAGE_TEMPLATE="Your code is: {code}",
        DEFAULT_PHONE_REGION=None,
        SMS_PROVIDER="console",
    )


@pytest.fixture
def repo():
    return InMemoryVerificationRepository()


@pytest.fixture
def sender():
    return RecordingSmsSender()


@pytest.fixture
def client(repo, sender, test_settings):
    app.dependency_overrides[get_verification_repository] = lambda: repo
    app.dependency_overrides[get_sender] = lambda: sender
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
