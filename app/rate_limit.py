"""Per-client rate limits for the abuse-prone auth routes.

Counters live in process memory, so limits apply per instance only.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, strategy="moving-window")

LOGIN_LIMIT = "3 per 15 minutes"
LOGIN_LIMIT_MESSAGE = "Too many login attempts. Please try again later."

SIGNUP_LIMIT = "3 per hour"
SIGNUP_LIMIT_MESSAGE = "Too many accounts created from this IP. Please try again later."

FORGOT_PASSWORD_LIMIT = "3 per 15 minutes"
FORGOT_PASSWORD_LIMIT_MESSAGE = "Too many password reset requests. Please try again after 15 minutes."
