"""Configuration settings for Authflow."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./authflow.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_DAYS: int = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

    # Password hashing
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Email
    MAIL_BACKEND: str = os.getenv("MAIL_BACKEND", "console").lower()
    MAIL_FROM_EMAIL: str = os.getenv("MAIL_FROM_EMAIL", "no-reply@authflow.local")
    MAIL_FROM_NAME: str = os.getenv("MAIL_FROM_NAME", "Authflow")
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

    # Background cleanup of unverified accounts
    CLEANUP_INTERVAL_SECONDS: int = int(os.getenv("CLEANUP_INTERVAL_SECONDS", "3600"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:5173").rstrip("/")

    def __init__(self) -> None:
        self._generated_secret = not self.JWT_SECRET_KEY
        if self._generated_secret:
            self.JWT_SECRET_KEY = secrets.token_urlsafe(32)

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production (secure cookies, no debug routes)."""
        return self.APP_ENV == "production"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self._generated_secret:
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if self.MAIL_BACKEND not in ("console", "smtp"):
            errors.append(f"MAIL_BACKEND '{self.MAIL_BACKEND}' is not supported - use 'console' or 'smtp'")
        if self.MAIL_BACKEND == "smtp" and not self.SMTP_HOST:
            errors.append("MAIL_BACKEND is 'smtp' but SMTP_HOST is not set")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
