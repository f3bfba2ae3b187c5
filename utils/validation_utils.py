"""
utils/validation_utils.py

Purpose: Input validation

- Phone number presence check
- Phone number parsing and E.164 normalization
"""

from typing import Optional

import phonenumbers

from app.core.exceptions import MissingPhoneError, InvalidPhoneError


def is_blank(value: Optional[str]) -> bool:
    """
    Checks for None, empty or whitespace-only strings.
    """
    return value is None or not value.strip()


def normalize_phone(phone: Optional[str], default_region: Optional[str] = None) -> str:
    """
    Parses free-form phone input into canonical E.164 format.

    The result is the partition key for all verification lookups, so the
    same number must always produce the same string regardless of
    spacing, punctuation or national/international notation.

    Args:
        phone: Raw phone input (e.g. "+1 (555) 555-0123")
        default_region: ISO region used when the input has no "+<country code>".
            None means the country code is mandatory.

    Returns:
        E.164 phone number (e.g. "+15555550123")

    Raises:
        MissingPhoneError: If phone is None, empty or whitespace
        InvalidPhoneError: If phone cannot be parsed as a valid number
    """
    if is_blank(phone):
        raise MissingPhoneError()

    try:
        number = phonenumbers.parse(phone.strip(), default_region)
    except phonenumbers.NumberParseException as e:
        raise InvalidPhoneError() from e

    if not phonenumbers.is_valid_number(number):
        raise InvalidPhoneError()

    return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)
