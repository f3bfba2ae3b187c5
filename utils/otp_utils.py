"""
utils/otp_utils.py

Purpose: One-time code derivation

- Per-version secret generation
- RFC 4226 HOTP (HMAC-SHA1, dynamic truncation)

Codes are never stored: they are re-derived from (secret_key, version).
"""

import hashlib
import hmac
import secrets
import struct

MIN_DIGITS = 6
MAX_DIGITS = 8


def generate_secret_key(length: int = 20) -> bytes:
    """
    Generates a random HOTP secret (20 bytes matches the SHA1 block recommendation).
    """
    return secrets.token_bytes(length)


def compute_hotp(secret_key: bytes, counter: int, digits: int = 6) -> str:
    """
    Computes an HOTP code.

    Args:
        secret_key: Shared secret bytes
        counter: Moving factor (the verification version)
        digits: Code length, 6 to 8

    Returns:
        Zero-padded numeric code of length `digits`
    """
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise ValueError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}")
    if counter < 0:
        raise ValueError("counter must be non-negative")

    digest = hmac.new(secret_key, struct.pack(">Q", counter), hashlib.sha1).digest()

    offset = digest[-1] & 0x0F
    binary = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF

    return str(binary % (10 ** digits)).zfill(digits)
