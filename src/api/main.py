"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance, wires the domain
services from settings during lifespan startup, and registers the
exception handlers that map domain errors to responses.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.notifier import ConsoleNotifier, SmtpConfig, SmtpNotifier
from src.adapters.repository import (
    InMemoryAccountRepository,
    PostgresAccountRepository,
    run_migrations,
)
from src.api.auth import router as auth_router
from src.api.errors import register_exception_handlers
from src.api.models import HealthResponse
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.hashing import SecretHasher
from src.domain.otp import OtpGenerator
from src.domain.ports import AccountRepository, Notifier
from src.domain.session import SessionGuard
from src.domain.tokens import TokenService

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Account registration, OTP email verification and bearer token sessions",
    },
]


def build_notifier(settings: Settings) -> Notifier:
    """Notifier selected by NOTIFIER_BACKEND."""
    if settings.notifier_backend == "smtp":
        config = SmtpConfig(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout_seconds=settings.notifier_timeout_seconds,
        )
        return SmtpNotifier(config, ttl_minutes=settings.otp_ttl_minutes)
    return ConsoleNotifier()


def wire_services(
    app: FastAPI, settings: Settings, repository: AccountRepository, notifier: Notifier
) -> None:
    """Construct the domain services and store them on app.state."""
    tokens = TokenService(
        secret=settings.jwt_secret,
        expires_in=settings.token_lifetime,
        algorithm=settings.jwt_algorithm,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.account_service = AccountService(
        repository=repository,
        notifier=notifier,
        tokens=tokens,
        hasher=SecretHasher(rounds=settings.bcrypt_cost),
        otp=OtpGenerator(ttl_minutes=settings.otp_ttl_minutes),
    )
    app.state.session_guard = SessionGuard(tokens=tokens, repository=repository)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the repository (and connection pool for postgres) on startup
    - Runs migrations on startup
    - Wires the domain services
    - Closes the connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application (%s)...", settings.environment)
    if settings.is_production and settings.jwt_secret == "change-me":
        raise RuntimeError("JWT_SECRET must be set in production")

    pool: ConnectionPool | None = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        repository = PostgresAccountRepository(pool)
    else:
        logger.warning("Using in-memory account repository; data is not persisted")
        repository = InMemoryAccountRepository()

    wire_services(app, settings, repository, build_notifier(settings))
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Build the application with routes and exception handlers."""
    application = FastAPI(
        title="accounts",
        description="Account identity API - registration, OTP email verification and bearer tokens",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    application.include_router(auth_router, prefix="/api/auth")
    register_exception_handlers(application)

    @application.get("/api/health", response_model=HealthResponse)
    def health_check(request: Request) -> HealthResponse:
        """
        Health check endpoint with repository validation.

        Returns 200 OK if the application and its store are healthy.
        A store failure surfaces as a 500 through the error handlers.
        """
        request.app.state.repository.ping()
        return HealthResponse(
            success=True, message="API is working", timestamp=datetime.now(timezone.utc)
        )

    return application


app = create_app()
