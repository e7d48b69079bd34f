"""Typed exceptions for auth workflow failures.

Every exception carries the HTTP status it maps to and a message that is
safe to show to the end user as-is.
"""


class AuthError(Exception):
    """Base class for auth workflow errors."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed input, or an invalid/expired one-time code."""

    status_code = 400
    default_message = "Invalid request."


class UnauthorizedError(AuthError):
    """Bad credentials or missing session."""

    status_code = 401
    default_message = "Unauthorized. Please login to continue."


class InvalidTokenError(UnauthorizedError):
    """
    Session token is malformed, tampered with, or expired.

    The three cases are deliberately indistinguishable to callers.
    """

    default_message = "Invalid or expired token. Please login again."


class ForbiddenError(AuthError):
    """Authenticated but not allowed (unverified email)."""

    status_code = 403
    default_message = "Forbidden."


class NotFoundError(AuthError):
    """No account for the given email."""

    status_code = 404
    default_message = "Not found."


class ConflictError(AuthError):
    """Email already registered."""

    status_code = 409
    default_message = "A user with this email already exists."


class InternalError(AuthError):
    """Store, hashing, signing or transport fault."""


class EmailDeliveryError(InternalError):
    """Configured mail transport failed to deliver a message."""

    default_message = "Failed to send email."
