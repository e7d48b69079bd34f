"""JWT Token Service."""

from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.exceptions import InvalidTokenError


class JWTService:
    """Handles session token creation and validation."""

    def __init__(self) -> None:
        settings = get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_days = settings.JWT_EXPIRE_DAYS

    @property
    def max_age_seconds(self) -> int:
        """Token lifetime in seconds, used for the cookie max-age."""
        return self.expire_days * 24 * 60 * 60

    def create_token(self, user_id: int, expires_delta: timedelta | None = None) -> str:
        """Create a signed token carrying only the user id."""
        now = datetime.utcnow()
        expire = now + (expires_delta if expires_delta is not None else timedelta(days=self.expire_days))
        payload = {
            "userId": user_id,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. Returns None if invalid."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def verify_token(self, token: str | None) -> int:
        """Return the user id of a valid token, raise InvalidTokenError otherwise."""
        if not token:
            raise InvalidTokenError()
        payload = self.decode_token(token)
        if not payload:
            raise InvalidTokenError()
        user_id = payload.get("userId")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidTokenError()
        return user_id


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
