"""
Test SMS delivery

Run this script to verify the SMS provider is configured correctly
and can send messages.

Usage: python scripts/test_sms.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.core.config import settings
from app.core.exceptions import PhoneVerifyError
from app.services.sms_service import create_sms_sender
from utils.otp_utils import compute_hotp, generate_secret_key
from utils.validation_utils import normalize_phone


def check_config() -> bool:
    """Test if the SMS provider is properly configured"""
    print("=" * 60)
    print("  SMS Configuration Test")
    print("=" * 60 + "\n")

    print(f"Provider: {settings.SMS_PROVIDER}")
    if settings.SMS_PROVIDER == "twilio":
        print(f"Account SID: {settings.TWILIO_ACCOUNT_SID[:10]}..." if settings.TWILIO_ACCOUNT_SID else "Account SID: not set")
        print(f"Auth Token: {'set' if settings.TWILIO_AUTH_TOKEN else 'not set'}")
        print(f"From Number: {settings.TWILIO_FROM_NUMBER or 'not set'}")
        print(f"\nConfiguration valid: {'yes' if settings.twilio_configured else 'no'}\n")
        return settings.twilio_configured

    return True


async def send_test_message():
    """Sends a sample code to a number read from stdin"""
    raw_phone = input("Enter the destination number (with country code, e.g. +15555550123): ")

    try:
        phone = normalize_phone(raw_phone, settings.DEFAULT_PHONE_REGION)
    except PhoneVerifyError as e:
        print(f"\n{e.message}")
        return

    code = compute_hotp(generate_secret_key(settings.SECRET_KEY_BYTES), 1, settings.OTP_DIGITS)
    body = settings.SMS_MESSAGE_TEMPLATE.format(code=code)

    print(f"\nSending test message to {phone}...")
    try:
        message_id = await create_sms_sender(settings).send(phone, body)
    except PhoneVerifyError as e:
        print(f"\nFailed to send message: {e.message}")
        return

    print(f"\nMessage sent successfully! Message id: {message_id}")


async def main():
    if not check_config():
        print("Please set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM_NUMBER in .env")
        return

    if input("Do you want to send a test message? (y/n): ").lower() == "y":
        await send_test_message()


if __name__ == "__main__":
    asyncio.run(main())
