"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting domain services
into routes, plus the session guard and role gate used on protected routes.
Collaborators are built once during app lifespan and kept on app.state.
"""

from collections.abc import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config.settings import Settings
from src.domain.accounts import AccountService
from src.domain.ports import Account, Role
from src.domain.session import SessionGuard, require_role

TOKEN_COOKIE = "token"


def get_app_settings(request: Request) -> Settings:
    """Settings the app was started with."""
    return request.app.state.settings


def get_account_service(request: Request) -> AccountService:
    """Account service wired during lifespan startup."""
    return request.app.state.account_service


def get_session_guard(request: Request) -> SessionGuard:
    """Session guard wired during lifespan startup."""
    return request.app.state.session_guard


# Bearer security scheme for OpenAPI documentation. auto_error is off so a
# missing header falls through to the cookie and the guard's own message.
http_bearer = HTTPBearer(auto_error=False)


def get_bearer_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
) -> str | None:
    """
    Extract the candidate token.

    The Authorization: Bearer header wins; the token cookie is the fallback.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE)


def get_current_account(
    token: str | None = Depends(get_bearer_token),
    guard: SessionGuard = Depends(get_session_guard),
) -> Account:
    """Resolve the request's token to a live account or fail with 401."""
    return guard.authenticate(token)


def require_roles(*roles: Role) -> Callable[..., Account]:
    """
    Build a dependency that admits only accounts holding one of `roles`.

    Usage:
        @router.get("/admin", dependencies=[Depends(require_roles(Role.ADMIN))])
    """

    def role_gate(account: Account = Depends(get_current_account)) -> Account:
        return require_role(account, roles)

    return role_gate
