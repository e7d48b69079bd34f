"""Authentication API endpoints."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import CurrentUser, clear_auth_cookie, get_current_user, set_auth_cookie
from app.exceptions import AuthError, InternalError
from app.rate_limit import (
    FORGOT_PASSWORD_LIMIT,
    FORGOT_PASSWORD_LIMIT_MESSAGE,
    LOGIN_LIMIT,
    LOGIN_LIMIT_MESSAGE,
    SIGNUP_LIMIT,
    SIGNUP_LIMIT_MESSAGE,
    limiter,
)
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    UserEnvelope,
    UserListEnvelope,
    UserResponse,
    VerifyEmailRequest,
)
from app.services.auth import get_auth_service
from app.services.jwt import get_jwt_service

logger = logging.getLogger("authflow")

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@contextmanager
def server_errors(action: str) -> Iterator[None]:
    """Turn unexpected failures into a generic 500 for the given action."""
    try:
        yield
    except AuthError:
        raise
    except Exception:
        logger.exception("%s error", action.capitalize())
        raise InternalError(f"Server error during {action}.") from None


def issue_session(response: Response, user_id: int) -> str:
    """Sign a session token for the user and attach it as the auth cookie."""
    token = get_jwt_service().create_token(user_id)
    set_auth_cookie(response, token)
    return token


@router.get("/check-auth", response_model=UserEnvelope)
def check_auth(
    current: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Return the user behind the session cookie."""
    with server_errors("check auth"):
        user = get_auth_service().get_user(db, current.user_id)
        return UserEnvelope(message="User is authenticated", user=UserResponse.model_validate(user))


if not get_settings().is_production:

    @router.get("/", response_model=UserListEnvelope)
    def list_users(db: Session = Depends(get_db)) -> UserListEnvelope:
        """List every account. Development only."""
        with server_errors("fetching users"):
            users = get_auth_service().list_users(db)
            return UserListEnvelope(
                message="Users fetched successfully",
                count=len(users),
                users=[UserResponse.model_validate(u) for u in users],
            )


@router.post("/signup", response_model=UserEnvelope, status_code=201)
@limiter.limit(SIGNUP_LIMIT, error_message=SIGNUP_LIMIT_MESSAGE)
def signup(
    request: Request,
    response: Response,
    body: SignupRequest | None = None,
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Register a new, unverified account and send its verification code."""
    body = body or SignupRequest()
    logger.info("Signup request received: %s", body.email)
    with server_errors("signup"):
        user = get_auth_service().signup(db, body.email, body.password, body.name)
        issue_session(response, user.id)
        return UserEnvelope(
            message="User created successfully. Please check your email to verify your account.",
            user=UserResponse.model_validate(user),
        )


@router.post("/login", response_model=UserEnvelope)
@limiter.limit(LOGIN_LIMIT, error_message=LOGIN_LIMIT_MESSAGE)
def login(
    request: Request,
    response: Response,
    body: LoginRequest | None = None,
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Authenticate with email and password and start a session."""
    body = body or LoginRequest()
    with server_errors("login"):
        user = get_auth_service().login(db, body.email, body.password)
        issue_session(response, user.id)
        return UserEnvelope(message="Logged in successfully", user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Tokens already issued stay valid until they expire."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.post("/verify-email", response_model=UserEnvelope)
def verify_email(
    response: Response,
    body: VerifyEmailRequest | None = None,
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Verify the account holding the code and log it in."""
    body = body or VerifyEmailRequest()
    with server_errors("email verification"):
        user = get_auth_service().verify_email(db, body.code)
        issue_session(response, user.id)
        return UserEnvelope(message="Email verified successfully.", user=UserResponse.model_validate(user))


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(FORGOT_PASSWORD_LIMIT, error_message=FORGOT_PASSWORD_LIMIT_MESSAGE)
def forgot_password(
    request: Request,
    body: ForgotPasswordRequest | None = None,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Email a password reset link. The token itself is never returned."""
    body = body or ForgotPasswordRequest()
    with server_errors("forgot password"):
        get_auth_service().forgot_password(db, body.email)
        return MessageResponse(message="Reset password email sent successfully.")


@router.post("/reset-password/{token}", response_model=MessageResponse)
def reset_password(
    token: str,
    body: ResetPasswordRequest | None = None,
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Set a new password using the token from the reset email."""
    body = body or ResetPasswordRequest()
    with server_errors("password reset"):
        get_auth_service().reset_password(db, token, body.password)
        return MessageResponse(message="Password reset successfully.")
