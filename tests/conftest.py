"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable clock for OTP and token expiry
- A recording notifier that captures delivered codes
- In-memory repository and fully wired AccountService
- A TestClient running the real app against the in-memory backend
"""

from collections.abc import Generator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from src.adapters.repository.memory import InMemoryAccountRepository
from src.api.main import create_app
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from src.domain.hashing import SecretHasher
from src.domain.otp import OtpGenerator
from src.domain.tokens import TokenService

from tests.support import TEST_SECRET, FixedClock, RecordingNotifier


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture(scope="session")
def hasher() -> SecretHasher:
    return SecretHasher(rounds=10)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret=TEST_SECRET, expires_in=timedelta(hours=1))


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    notifier: RecordingNotifier,
    tokens: TokenService,
    hasher: SecretHasher,
    clock: FixedClock,
) -> AccountService:
    return AccountService(
        repository=repository,
        notifier=notifier,
        tokens=tokens,
        hasher=hasher,
        otp=OtpGenerator(),
        clock=clock,
    )


@pytest.fixture
def app_client(
    monkeypatch: pytest.MonkeyPatch, notifier: RecordingNotifier
) -> Generator[TestClient, None, None]:
    """TestClient for the real app wired to the in-memory repository."""
    monkeypatch.setenv("REPOSITORY_BACKEND", "memory")
    monkeypatch.setenv("NOTIFIER_BACKEND", "console")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    get_settings.cache_clear()

    with TestClient(create_app()) as client:
        client.app.state.account_service.notifier = notifier
        yield client

    get_settings.cache_clear()
