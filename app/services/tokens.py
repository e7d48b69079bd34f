"""One-time codes for email verification and password reset."""

import secrets
from datetime import datetime, timedelta

VERIFICATION_TOKEN_TTL = timedelta(hours=24)
RESET_TOKEN_TTL = timedelta(hours=1)
RESET_TOKEN_BYTES = 20


def generate_verification_code() -> str:
    """Six-digit numeric code meant to be typed in by the user."""
    return str(100000 + secrets.randbelow(900000))


def generate_reset_token() -> str:
    """Random hex token meant for a URL path segment, not manual entry."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def verification_expiry(now: datetime | None = None) -> datetime:
    return (now or datetime.utcnow()) + VERIFICATION_TOKEN_TTL


def reset_expiry(now: datetime | None = None) -> datetime:
    return (now or datetime.utcnow()) + RESET_TOKEN_TTL
