"""One-time passcode challenge models."""

import secrets
from datetime import datetime
from enum import StrEnum

from classroll.core.db import MongoModel

OTP_MIN = 100000
OTP_MAX = 999999


class OtpVerdict(StrEnum):
    """Outcome of checking a submitted passcode.

    - OK: code matched, challenge consumed
    - NOT_FOUND: no live challenge for the email (never issued, consumed or expired earlier)
    - EXPIRED: challenge was past its expiry, now deleted
    - MISMATCH: code differs, challenge kept for another attempt
    """

    OK = "ok"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MISMATCH = "mismatch"


class OtpChallenge(MongoModel):
    """Pending passcode for one email. Indexed on email - unique, expires_at - TTL."""

    email: str
    code: str
    expires_at: datetime

    def is_expired(self, at: datetime) -> bool:
        return at > self.expires_at


def generate_otp_code() -> str:
    """Uniformly random 6-digit code from a cryptographically strong source."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))
