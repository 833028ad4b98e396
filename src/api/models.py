"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models are the structural filter in front of the domain: malformed
bodies never reach AccountService.
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from src.domain.accounts import AccountSummary
from src.domain.ports import Role

_PASSWORD_STRENGTH = re.compile(r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).*$")

# bcrypt only accepts the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


def _within_bcrypt_limit(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=50, description="Display name")
    email: EmailStr
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Password (min 6 characters, with a digit, a lowercase and an uppercase letter)",
    )

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not _PASSWORD_STRENGTH.match(value):
            raise ValueError(
                "Password must contain at least one number, one uppercase and one lowercase letter"
            )
        return _within_bcrypt_limit(value)


class VerifyEmailRequest(BaseModel):
    """Request model for email verification."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    otp: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^\d{6}$",
        description="6-digit verification code",
    )


class ResendOtpRequest(BaseModel):
    """Request model for reissuing a verification code."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr


class LoginRequest(BaseModel):
    """Request model for login."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def password_bytes(cls, value: str) -> str:
        return _within_bcrypt_limit(value)


class AccountData(BaseModel):
    """Public account representation. Never carries the hash or OTP."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    is_verified: bool
    role: Role
    created_at: datetime

    @classmethod
    def from_summary(cls, summary: AccountSummary) -> "AccountData":
        return cls(
            id=summary.id,
            name=summary.name,
            email=summary.email,
            is_verified=summary.is_verified,
            role=summary.role,
            created_at=summary.created_at,
        )


class ApiResponse(BaseModel):
    """Success envelope shared by every auth endpoint."""

    success: bool = True
    message: str | None = None
    token: str | None = None
    data: AccountData | None = None


class HealthResponse(BaseModel):
    """Response model for the health check."""

    success: bool
    message: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    message: str
    stack: str | None = None
