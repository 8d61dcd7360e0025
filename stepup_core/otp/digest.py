"""
Operation Digest
================
Salted, keyed digest of operation data rendered as a numeric code.
"""

import hashlib
import hmac
import secrets
from typing import Sequence

SALT_LENGTH = 16
CODE_LENGTH = 8
ITEM_SEPARATOR = "&"


def generate_salt(length: int = SALT_LENGTH) -> bytes:
    """Generate a random salt from a cryptographically secure source."""
    return secrets.token_bytes(length)


def compute_digest(items: Sequence[str], salt: bytes, length: int = CODE_LENGTH) -> str:
    """
    Derive a numeric code from operation items.

    HMAC-SHA256 keyed with the salt over the items joined by ``&``,
    truncated dynamically (as in HOTP) to ``length`` decimal digits.

    Args:
        items: Ordered operation items
        salt: Salt used as the HMAC key
        length: Number of digits

    Returns:
        Zero-padded numeric code
    """
    data = ITEM_SEPARATOR.join(items).encode("utf-8")
    mac = hmac.new(salt, data, hashlib.sha256).digest()

    offset = mac[-1] & 0x0F
    truncated = int.from_bytes(mac[offset:offset + 4], "big") & 0x7FFFFFFF

    return str(truncated % (10 ** length)).zfill(length)


def codes_match(submitted: str, expected: str) -> bool:
    """Compare codes in constant time."""
    return hmac.compare_digest(submitted.encode("utf-8"), expected.encode("utf-8"))
