"""
app/services/issuance_service.py

Purpose: Verification code issuance

- Normalizes the phone number
- Applies the rate limit before any write
- Resolves the current verification version
- Derives the HOTP code and sends it by SMS

A delivery failure leaves the resolved version in place, so a retried
request reuses the pending code instead of minting a new version.
"""

from datetime import datetime
from typing import Optional

from app.core.config import Settings
from app.core.exceptions import MissingPhoneError, InvalidPhoneError, RateLimitExceededError
from app.core.logging import get_logger, mask_phone, LogContext
from app.db.verification_repository import VerificationRepository
from app.schemas.verification import StartResponse
from app.services.rate_limit_service import evaluate_rate_limit
from app.services.sms_service import SmsSender
from app.services.verification_service import obtain_current
from utils.otp_utils import compute_hotp
from utils.time_utils import utcnow
from utils.validation_utils import normalize_phone

logger = get_logger(__name__)


async def start_verification(
    raw_phone: Optional[str],
    repository: VerificationRepository,
    sender: SmsSender,
    config: Settings,
    now: Optional[datetime] = None
) -> StartResponse:
    """
    Issues (or re-sends) a verification code for a phone number.

    Args:
        raw_phone: Phone number as submitted by the client
        repository: Verification store
        sender: SMS delivery provider
        config: Verification policy settings
        now: Request time (defaults to current UTC)

    Returns:
        StartResponse carrying the verification id

    Raises:
        MissingPhoneError, InvalidPhoneError: Bad input
        RateLimitExceededError: Too many recent verifications
        PersistenceError: Store failure
        DeliveryError: SMS provider failure
    """
    try:
        phone = normalize_phone(raw_phone, config.DEFAULT_PHONE_REGION)
    except (MissingPhoneError, InvalidPhoneError) as e:
        logger.warning(f"Phone rejected: {e.code}")
        raise

    now = now or utcnow()

    with LogContext(phone=mask_phone(phone)):
        recent = await repository.get_recent_verifications(phone, config.RATE_LIMIT_LOOKBACK)
        decision = evaluate_rate_limit(
            recent,
            max_attempts=config.MAX_ATTEMPTS,
            window_minutes=config.RATE_LIMIT_WINDOW_MINUTES,
            now=now
        )
        if not decision.allowed:
            raise RateLimitExceededError()

        current = await obtain_current(
            repository,
            phone,
            validity_minutes=config.VERIFICATION_VALIDITY_MINUTES,
            now=now
        )

        with LogContext(verification_id=current.id, version=current.version):
            code = compute_hotp(current.secret_key, current.version, config.OTP_DIGITS)
            message = config.SMS_MESSAGE_TEMPLATE.format(code=code)

            message_id = await sender.send(phone, message)
            logger.info(f"Verification code sent. MessageId: {message_id}")

    return StartResponse(id=current.id)
