"""
app/services/sms_service.py

Purpose: SMS delivery

- Sends verification codes via Twilio Programmable SMS
- Console sender for local development
- Provider failures surface as DeliveryError
"""

import uuid
from typing import Protocol, Optional

import httpx

from app.core.config import Settings, settings
from app.core.exceptions import DeliveryError
from app.core.logging import get_logger, mask_phone

logger = get_logger(__name__)


class SmsSender(Protocol):
    async def send(self, to_phone: str, body: str) -> str:
        """Sends `body` to `to_phone` and returns the provider's delivery id."""
        ...


class TwilioSmsSender:
    """Service for sending SMS via the Twilio REST API"""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str = "https://api.twilio.com/2010-04-01",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.base_url = f"{base_url}/Accounts/{account_sid}"
        self.timeout = timeout
        self._transport = transport

    async def send(self, to_phone: str, body: str) -> str:
        """
        Sends an SMS via Twilio

        Args:
            to_phone: Recipient phone (+15555550123)
            body: Message text

        Returns:
            Twilio message SID

        Raises:
            DeliveryError: On non-2xx responses, timeouts or transport errors
        """
        url = f"{self.base_url}/Messages.json"
        data = {
            "From": self.from_number,
            "To": to_phone,
            "Body": body
        }

        logger.info(f"Sending Twilio SMS to {mask_phone(to_phone)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    data=data,
                    auth=(self.account_sid, self.auth_token)
                )
        except httpx.TimeoutException as e:
            logger.error("Twilio API timeout")
            raise DeliveryError() from e
        except httpx.HTTPError as e:
            logger.error(f"Twilio transport error: {e}")
            raise DeliveryError() from e

        if response.status_code not in (200, 201):
            logger.error(f"Twilio API error: {response.status_code} - {response.text}")
            raise DeliveryError()

        message_sid = response.json().get("sid")
        logger.info(f"SMS sent: SID={message_sid}")
        return message_sid


class ConsoleSmsSender:
    """Logs messages instead of sending them. Development only."""

    async def send(self, to_phone: str, body: str) -> str:
        message_id = f"console-{uuid.uuid4().hex}"
        logger.info(f"[console sms] to={mask_phone(to_phone)} id={message_id} length={len(body)}")
        return message_id


class UnconfiguredSmsSender:
    """Stands in for a provider whose credentials are missing; every send fails."""

    def __init__(self, provider: str):
        self.provider = provider

    async def send(self, to_phone: str, body: str) -> str:
        logger.error(f"SMS provider '{self.provider}' is not configured, cannot send to {mask_phone(to_phone)}")
        raise DeliveryError()


def create_sms_sender(config: Settings = settings) -> SmsSender:
    """
    Builds the sender selected by SMS_PROVIDER.

    Never raises: a missing configuration surfaces as DeliveryError when a
    message is actually sent, after the request has been validated.
    """
    if config.SMS_PROVIDER == "console":
        logger.debug("Using console SMS sender, no messages will be delivered")
        return ConsoleSmsSender()

    if not config.twilio_configured:
        return UnconfiguredSmsSender(config.SMS_PROVIDER)

    return TwilioSmsSender(
        account_sid=config.TWILIO_ACCOUNT_SID,
        auth_token=config.TWILIO_AUTH_TOKEN,
        from_number=config.TWILIO_FROM_NUMBER,
        base_url=config.TWILIO_BASE_URL,
        timeout=config.SMS_TIMEOUT_SECONDS
    )
