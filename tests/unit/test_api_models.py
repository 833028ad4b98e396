"""
Unit tests for API request and response models.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.api.models import (
    AccountData,
    ApiResponse,
    LoginRequest,
    RegisterRequest,
    VerifyEmailRequest,
)
from src.domain.accounts import AccountSummary
from src.domain.ports import Role


class TestRegisterRequest:
    """Tests for RegisterRequest validation."""

    def test_valid_request(self) -> None:
        request = RegisterRequest(name=" Ann ", email="ann@x.com", password="Secr3tP")
        assert request.name == "Ann"
        assert request.email == "ann@x.com"

    @pytest.mark.parametrize("name", ["A", "x" * 51, "   "])
    def test_name_length(self, name: str) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(name=name, email="ann@x.com", password="Secr3tP")

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(name="Ann", email="not-an-email", password="Secr3tP")

    @pytest.mark.parametrize("password", ["Ab1", "secr3tp", "SECR3TP", "SecretP"])
    def test_password_rules(self, password: str) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(name="Ann", email="ann@x.com", password=password)

    def test_password_rule_message(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(name="Ann", email="ann@x.com", password="secretpw")
        assert "one number, one uppercase and one lowercase" in str(exc_info.value)

    def test_multibyte_password_over_72_bytes_rejected(self) -> None:
        # 43 characters, 83 bytes
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(name="Ann", email="ann@x.com", password="Aa1" + "\u00e9" * 40)
        assert "at most 72 bytes" in str(exc_info.value)

    def test_password_of_exactly_72_bytes_accepted(self) -> None:
        password = "Aa1" + "\u00e9" * 34 + "x"
        assert len(password.encode()) == 72
        assert RegisterRequest(name="Ann", email="ann@x.com", password=password).password == password


class TestVerifyEmailRequest:
    """Tests for VerifyEmailRequest validation."""

    def test_valid(self) -> None:
        assert VerifyEmailRequest(email="ann@x.com", otp="012345").otp == "012345"

    @pytest.mark.parametrize("otp", ["12345", "1234567", "12a456", ""])
    def test_otp_must_be_6_digits(self, otp: str) -> None:
        with pytest.raises(ValidationError):
            VerifyEmailRequest(email="ann@x.com", otp=otp)


class TestLoginRequest:
    """Tests for LoginRequest validation."""

    def test_empty_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email="ann@x.com", password="")

    def test_multibyte_password_over_72_bytes_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email="ann@x.com", password="Aa1" + "\u00e9" * 40)


class TestAccountData:
    """Tests for the public account representation."""

    def summary(self) -> AccountSummary:
        return AccountSummary(
            id="1",
            name="Ann",
            email="ann@x.com",
            is_verified=True,
            role=Role.USER,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    def test_serializes_camel_case(self) -> None:
        data = AccountData.from_summary(self.summary()).model_dump(by_alias=True, mode="json")

        assert data == {
            "id": "1",
            "name": "Ann",
            "email": "ann@x.com",
            "isVerified": True,
            "role": "user",
            "createdAt": "2024-01-01T00:00:00Z",
        }

    def test_no_secret_fields(self) -> None:
        fields = set(AccountData.model_fields)
        assert "password_hash" not in fields
        assert "challenge" not in fields

    def test_envelope_drops_empty_fields(self) -> None:
        envelope = ApiResponse(message="ok").model_dump(exclude_none=True)
        assert envelope == {"success": True, "message": "ok"}
