"""Session cookie handling and the authentication dependency for protected routes."""

from dataclasses import dataclass

from fastapi import Request, Response

from app.config import get_settings
from app.exceptions import UnauthorizedError
from app.services.jwt import get_jwt_service

AUTH_COOKIE_NAME = "token"


@dataclass
class CurrentUser:
    """Identity resolved from the session cookie."""

    user_id: int


def get_current_user(request: Request) -> CurrentUser:
    """Validate the session cookie. Raises 401 if missing, invalid or expired.

    Only the token is checked here; loading the user record is left to the
    routes that need it.
    """
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Unauthorized. Please login to continue.")

    user_id = get_jwt_service().verify_token(token)
    return CurrentUser(user_id=user_id)


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "samesite": "strict",
        "secure": get_settings().is_production,
        "path": "/",
    }


def set_auth_cookie(response: Response, token: str) -> None:
    """Set the session cookie."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=get_jwt_service().max_age_seconds,
        **_cookie_options(),
    )


def clear_auth_cookie(response: Response) -> None:
    """Clear the session cookie using the same attributes it was set with."""
    response.delete_cookie(key=AUTH_COOKIE_NAME, **_cookie_options())
