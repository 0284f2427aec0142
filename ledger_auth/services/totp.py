"""
TOTP engine - Time-based One-Time Passwords (RFC 6238, HMAC-SHA1)

Codes are six digits derived from a shared secret and a 30 second time
step. Verification accepts the previous, current and next step to absorb
clock skew. Used codes are not tracked, so a code can be replayed inside
its own validity window.
"""

import hashlib
import hmac
import struct
import time
from typing import Optional
import pyotp

from ledger_auth.utils import base32
from ledger_auth.utils.security import constant_time_compare


TIME_STEP_SECONDS = 30
CODE_DIGITS = 6
SKEW_STEPS = 1
SECRET_BYTES = 20


def time_step_at(unix_time: float) -> int:
    """Return the 30 second counter for a unix timestamp"""
    return int(unix_time // TIME_STEP_SECONDS)


def generate_code(secret: bytes, time_step: int) -> str:
    """
    Derive the one-time code for a time step

    Args:
        secret: Raw shared secret
        time_step: Counter value (unix time // 30)

    Returns:
        Six digit code, left-padded with zeros
    """
    counter = struct.pack(">Q", time_step)
    digest = hmac.new(secret, counter, hashlib.sha1).digest()

    offset = digest[-1] & 0x0F
    value = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF

    return str(value % 10 ** CODE_DIGITS).zfill(CODE_DIGITS)


def verify_code(secret_text: str, user_code: str, now: Optional[float] = None) -> bool:
    """
    Verify a user supplied code against a Base32 secret

    Args:
        secret_text: Base32 secret as stored for the identity
        user_code: Code typed by the user
        now: Unix time to verify at (defaults to the wall clock)

    Returns:
        True if the code matches the current step or one step either side.
        Malformed secrets or codes simply fail to match.
    """
    if not isinstance(secret_text, str) or not isinstance(user_code, str):
        return False

    secret = base32.decode(secret_text)
    if not secret:
        return False

    code = user_code.strip()
    step = time_step_at(time.time() if now is None else now)

    matched = False
    for drift in range(-SKEW_STEPS, SKEW_STEPS + 1):
        if step + drift < 0:
            continue
        # Check every step so timing does not reveal which one matched
        if constant_time_compare(generate_code(secret, step + drift), code):
            matched = True
    return matched


def current_code(secret_text: str, now: Optional[float] = None) -> str:
    """Return the code for the current time step of a Base32 secret"""
    step = time_step_at(time.time() if now is None else now)
    return generate_code(base32.decode(secret_text), step)


def generate_secret() -> str:
    """
    Generate a new shared secret

    Returns:
        20 random bytes as unpadded Base32 (32 characters)
    """
    return pyotp.random_base32(length=SECRET_BYTES * 8 // 5)


def provisioning_uri(issuer: str, username: str, secret: str) -> str:
    """
    Build the otpauth:// URI authenticator apps scan from a QR code

    Args:
        issuer: Issuer name shown in the authenticator app
        username: Account name
        secret: Base32 secret

    Returns:
        otpauth://totp/<issuer>:<username>?secret=<secret>&issuer=<issuer>
    """
    return pyotp.TOTP(secret).provisioning_uri(name=username, issuer_name=issuer)
