"""HTTP client that keeps a local mirror of the authenticated session.

The session cookie lives in the ``httpx.Client`` cookie jar; ``AuthState``
holds what a UI would display: the current user, whether a request is in
flight, and the last error or success flag.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger("authflow")

API_PREFIX = "/api/v1/auth"
SESSION_EXPIRED_MESSAGE = "Unauthorized. Please login to continue."


@dataclass
class AuthState:
    user: dict[str, Any] | None = None
    error: str | None = None
    success: bool | None = None
    is_authenticated: bool = False
    is_loading: bool = False
    is_checking_auth: bool = True

    @property
    def is_verified(self) -> bool:
        return bool(self.user and self.user.get("isVerified"))


class AuthClient:
    """Calls the auth API and updates ``state`` the way the UI expects."""

    def __init__(self, http: httpx.Client, prefix: str = API_PREFIX) -> None:
        self.http = http
        self.prefix = prefix.rstrip("/")
        self.state = AuthState()

    def sign_up(self, email: str, password: str, name: str) -> bool:
        self._begin()
        try:
            data = self._post("/signup", {"email": email, "password": password, "name": name})
        except httpx.HTTPError as e:
            message = self._message(e, "An unexpected error occurred.")
            if message == SESSION_EXPIRED_MESSAGE:
                self._update(is_loading=False, error=None, success=False, is_authenticated=False)
            else:
                self._fail(message)
            return False
        self._update(user=data.get("user"), is_authenticated=True, is_loading=False, success=data.get("success"))
        return True

    def verify_email(self, code: str) -> bool:
        self._begin()
        try:
            data = self._post("/verify-email", {"code": code})
        except httpx.HTTPError as e:
            self._fail(self._message(e, "Email verification failed."))
            return False
        self._update(user=data.get("user"), is_authenticated=True, is_loading=False, success=True)
        return True

    def login(self, email: str, password: str) -> bool:
        self._begin()
        try:
            data = self._post("/login", {"email": email, "password": password})
        except httpx.HTTPError as e:
            self._fail(self._message(e, "Error logging in"))
            return False
        self._update(user=data.get("user"), is_authenticated=True, is_loading=False, success=True)
        return True

    def logout(self) -> bool:
        self._begin()
        try:
            self._post("/logout")
        except httpx.HTTPError as e:
            self._fail(self._message(e, "Error logging out"))
            return False
        self._update(user=None, is_authenticated=False, is_loading=False, success=True)
        return True

    def check_auth(self) -> bool:
        """Restore the session from the cookie jar, e.g. on startup."""
        self._update(is_checking_auth=True, error=None, success=False)
        try:
            response = self.http.get(f"{self.prefix}/check-auth")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            message = self._message(e, "An unexpected error occurred.")
            self._update(
                is_checking_auth=False,
                error=None if message == SESSION_EXPIRED_MESSAGE else message,
                success=False,
                is_authenticated=False,
            )
            return False
        self._update(
            user=data.get("user"),
            is_authenticated=True,
            is_checking_auth=False,
            success=data.get("success"),
        )
        return True

    def forgot_password(self, email: str) -> bool:
        self._begin()
        try:
            data = self._post("/forgot-password", {"email": email})
        except httpx.HTTPError as e:
            self._fail(self._message(e, "Failed to send reset email"))
            return False
        self._update(is_loading=False, success=data.get("success"))
        return True

    def reset_password(self, token: str, new_password: str) -> bool:
        self._begin()
        try:
            data = self._post(f"/reset-password/{token}", {"password": new_password})
        except httpx.HTTPError as e:
            self._fail(self._message(e, "Failed to reset password"))
            return False
        self._update(is_loading=False, success=data.get("success"))
        return True

    # --- helpers ---

    def _post(self, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        response = self.http.post(f"{self.prefix}{path}", json=payload)
        response.raise_for_status()
        return response.json()

    def _begin(self) -> None:
        self._update(is_loading=True, error=None, success=False)

    def _fail(self, message: str) -> None:
        logger.debug("Auth request failed: %s", message)
        self._update(is_loading=False, error=message, success=False)

    def _update(self, **changes: Any) -> None:
        for key, value in changes.items():
            setattr(self.state, key, value)

    @staticmethod
    def _message(error: httpx.HTTPError, fallback: str) -> str:
        """Server-provided message if there is one, the fallback otherwise."""
        if isinstance(error, httpx.HTTPStatusError):
            try:
                message = error.response.json().get("message")
            except ValueError:
                message = None
            if message:
                return message
        return fallback
