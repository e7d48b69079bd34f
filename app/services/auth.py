"""Authentication workflows: signup, login, email verification and password reset.

Each method runs one flow against the user record store and raises an
``app.exceptions`` error as soon as a business rule fails. Session tokens
and cookies are the router's concern; this service only decides who the
caller is.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.exceptions import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from app.models.user import User
from app.services.email import EmailService, get_email_service
from app.services.password import PasswordHasher, get_password_hasher
from app.services.tokens import generate_reset_token, generate_verification_code, reset_expiry, verification_expiry

logger = logging.getLogger("authflow")

MIN_PASSWORD_LENGTH = 8
# Attempts at drawing a verification code no pending account currently holds.
MAX_CODE_ATTEMPTS = 10

INVALID_CREDENTIALS = "Invalid email or password."


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Handles user registration, authentication, verification and password reset."""

    def __init__(self, hasher: PasswordHasher | None = None, email_service: EmailService | None = None) -> None:
        self.hasher = hasher or get_password_hasher()
        self.email_service = email_service or get_email_service()

    # --- Lookups ---

    def get_user(self, db: Session, user_id: int) -> User:
        """Resolve a session's user id to its record."""
        user = db.get(User, user_id)
        if not user:
            raise UnauthorizedError()
        return user

    def get_user_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == normalize_email(email)).first()

    def list_users(self, db: Session) -> list[User]:
        return db.query(User).order_by(User.created_at).all()

    # --- Flows ---

    def signup(self, db: Session, email: str | None, password: str | None, name: str | None) -> User:
        """Create an unverified account and email it a verification code."""
        if not email or not password or not name or not email.strip() or not name.strip():
            raise ValidationError("All fields are required (email, password, name).")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

        # Fast path only; the unique index on email is the real guard.
        if self.get_user_by_email(db, email):
            raise ConflictError("A user with this email already exists.")

        user = User(
            email=normalize_email(email),
            name=name.strip(),
            password_hash=self.hasher.hash(password),
            is_verified=False,
            verification_token=self._new_verification_code(db),
            verification_token_expires_at=verification_expiry(),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("A user with this email already exists.") from None
        db.refresh(user)
        logger.info("User created: id=%s", user.id)

        self.email_service.send_verification_email(user.email, user.verification_token)
        return user

    def login(self, db: Session, email: str | None, password: str | None) -> User:
        """Check credentials. Unknown email and wrong password fail identically."""
        if not email or not password:
            raise ValidationError("All fields are required (email and password).")

        user = self.get_user_by_email(db, email)
        if not user:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not user.is_verified:
            raise ForbiddenError("Please verify your email before logging in.")

        if not self.hasher.verify(password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        user.last_login = datetime.utcnow()
        db.commit()
        logger.info("User logged in: id=%s", user.id)
        return user

    def verify_email(self, db: Session, code: int | str | None) -> User:
        """Consume a verification code and mark its account verified."""
        now = datetime.utcnow()
        user = None
        if code:
            user = (
                db.query(User)
                .filter(User.verification_token == str(code).strip(), User.verification_token_expires_at > now)
                .first()
            )
        if not user:
            raise ValidationError("Invalid or expired verification code.")

        user.is_verified = True
        user.verification_token = None
        user.verification_token_expires_at = None
        db.commit()
        logger.info("User verified: id=%s", user.id)

        self.email_service.send_welcome_email(user.email, user.name)
        return user

    def forgot_password(self, db: Session, email: str | None) -> None:
        """Issue a reset token and email the reset link.

        Unlike login, this reveals whether the email is registered.
        """
        if not email or not email.strip():
            raise ValidationError("Email is required.")

        user = self.get_user_by_email(db, email)
        if not user:
            raise NotFoundError("No user found with this email.")

        token = generate_reset_token()
        user.reset_password_token = token
        user.reset_password_expires_at = reset_expiry()
        db.commit()
        logger.info("Password reset requested: id=%s", user.id)

        reset_url = f"{get_settings().CLIENT_URL}/reset-password/{token}"
        self.email_service.send_password_reset_email(user.email, reset_url)

    def reset_password(self, db: Session, token: str, password: str | None) -> User:
        """Consume a reset token and replace the password hash."""
        if not password:
            raise ValidationError("Password is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        user = (
            db.query(User)
            .filter(User.reset_password_token == token, User.reset_password_expires_at > datetime.utcnow())
            .first()
        )
        if not user:
            raise ValidationError("Invalid or expired reset token.")

        user.password_hash = self.hasher.hash(password)
        user.reset_password_token = None
        user.reset_password_expires_at = None
        db.commit()
        logger.info("Password reset: id=%s", user.id)

        self.email_service.send_password_reset_success_email(user.email)
        return user

    # --- Maintenance ---

    def delete_expired_unverified_users(self, db: Session, now: datetime | None = None) -> int:
        """Delete accounts still unverified after their verification code expired."""
        now = now or datetime.utcnow()
        deleted = (
            db.query(User)
            .filter(User.is_verified.is_(False), User.verification_token_expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    def _new_verification_code(self, db: Session) -> str:
        now = datetime.utcnow()
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_verification_code()
            taken = (
                db.query(User.id)
                .filter(User.verification_token == code, User.verification_token_expires_at > now)
                .first()
            )
            if not taken:
                return code
        return code


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
