"""
Auth API routes.

Defines REST endpoints for account registration, email verification,
login and session introspection. Domain errors propagate to the handlers
in src.api.errors; routes only shape successful responses.
"""

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import (
    TOKEN_COOKIE,
    get_account_service,
    get_app_settings,
    get_current_account,
)
from src.api.models import (
    AccountData,
    ApiResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    ResendOtpRequest,
    VerifyEmailRequest,
)
from src.config.settings import Settings
from src.domain.accounts import AccountService, AccountSummary
from src.domain.ports import Account

router = APIRouter(tags=["auth"])

LOGOUT_COOKIE_SECONDS = 10


@router.post(
    "/register",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Account already exists"},
    },
    summary="Register a new user",
    description="Create an unverified account. A 6-digit verification code "
    "is sent to the provided email.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> ApiResponse:
    summary = service.register(request_data.name, request_data.email, request_data.password)
    return ApiResponse(
        message="User registered successfully. Please check your email for verification OTP.",
        data=AccountData.from_summary(summary),
    )


@router.post(
    "/verify-email",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Missing, expired or invalid OTP"},
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Email already verified"},
    },
    summary="Verify email with OTP",
)
def verify_email(
    request_data: VerifyEmailRequest,
    service: AccountService = Depends(get_account_service),
) -> ApiResponse:
    """
    Consume the pending verification code and issue a bearer token.

    - **email**: Registered email address
    - **otp**: 6-digit code from the verification email
    """
    issued = service.verify_email(request_data.email, request_data.otp)
    return ApiResponse(
        message="Email verified successfully",
        token=issued.token,
        data=AccountData.from_summary(issued.account),
    )


@router.post(
    "/resend-otp",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={
        404: {"model": ErrorResponse, "description": "User not found"},
        409: {"model": ErrorResponse, "description": "Email already verified"},
    },
    summary="Resend verification OTP",
)
def resend_otp(
    request_data: ResendOtpRequest,
    service: AccountService = Depends(get_account_service),
) -> ApiResponse:
    service.resend_otp(request_data.email)
    return ApiResponse(message="OTP sent successfully. Please check your email.")


@router.post(
    "/login",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in",
    description="Returns a bearer token in the body and sets it as an HTTP-only cookie.",
)
def login(
    request_data: LoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> ApiResponse:
    issued = service.login(request_data.email, request_data.password)
    response.set_cookie(
        TOKEN_COOKIE,
        issued.token,
        max_age=settings.cookie_max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return ApiResponse(
        message="Logged in successfully",
        token=issued.token,
        data=AccountData.from_summary(issued.account),
    )


@router.post(
    "/logout",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
    summary="Log out",
    description="Clears the token cookie. Issued tokens remain valid until they expire; "
    "this is not server-side revocation.",
)
def logout(
    response: Response,
    _: Account = Depends(get_current_account),
) -> ApiResponse:
    response.set_cookie(
        TOKEN_COOKIE,
        "none",
        max_age=LOGOUT_COOKIE_SECONDS,
        httponly=True,
    )
    return ApiResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=ApiResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
    summary="Current account",
)
def me(account: Account = Depends(get_current_account)) -> ApiResponse:
    return ApiResponse(data=AccountData.from_summary(AccountSummary.of(account)))
