"""Pydantic schemas for authentication endpoints.

Request fields are optional so that missing values reach the service and
get its own validation messages instead of a generic schema error.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class VerifyEmailRequest(BaseModel):
    code: int | str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class ResetPasswordRequest(BaseModel):
    password: str | None = None


class UserResponse(BaseModel):
    """Sanitized user: everything except the password hash and one-time tokens."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    email: str
    name: str
    is_verified: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserEnvelope(MessageResponse):
    user: UserResponse


class UserListEnvelope(MessageResponse):
    count: int
    users: list[UserResponse]
