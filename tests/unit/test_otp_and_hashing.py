"""
Unit tests for OtpGenerator and SecretHasher.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from src.domain.exceptions import InvalidRequest
from src.domain.hashing import SecretHasher
from src.domain.otp import OtpGenerator
from src.domain.ports import PendingChallenge


class TestOtpGenerator:
    """Tests for OTP code generation and expiry."""

    def test_default_code_is_6_digits(self) -> None:
        code = OtpGenerator().generate()
        assert re.match(r"^\d{6}$", code)

    def test_code_is_string(self) -> None:
        """Codes are strings so leading zeros survive."""
        assert isinstance(OtpGenerator().generate(), str)

    def test_length_override(self) -> None:
        assert len(OtpGenerator().generate(length=8)) == 8

    def test_non_positive_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            OtpGenerator().generate(length=0)

    def test_codes_vary(self) -> None:
        """With 20 draws, at least two distinct codes (all-same is ~1e-114)."""
        generator = OtpGenerator()
        assert len({generator.generate() for _ in range(20)}) >= 2

    def test_expiry_defaults_to_15_minutes(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert OtpGenerator().expiry_from(now) == now + timedelta(minutes=15)

    def test_expiry_minutes_override(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert OtpGenerator().expiry_from(now, minutes=5) == now + timedelta(minutes=5)

    def test_challenge_binds_code_and_expiry(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        challenge = OtpGenerator(length=6, ttl_minutes=10).challenge(now)

        assert isinstance(challenge, PendingChallenge)
        assert len(challenge.code) == 6
        assert challenge.expires_at == now + timedelta(minutes=10)
        assert not challenge.is_expired(now)
        assert challenge.is_expired(now + timedelta(minutes=10, seconds=1))


class TestSecretHasher:
    """Tests for bcrypt hashing."""

    def test_hash_is_not_plaintext(self, hasher: SecretHasher) -> None:
        hashed = hasher.hash("Secr3tP")
        assert hashed != "Secr3tP"
        assert re.match(r"^\$2[aby]\$", hashed)

    def test_hash_cost_factor_at_least_10(self, hasher: SecretHasher) -> None:
        cost = int(hasher.hash("Secr3tP").split("$")[2])
        assert cost >= 10

    def test_hashes_are_salted(self, hasher: SecretHasher) -> None:
        assert hasher.hash("Secr3tP") != hasher.hash("Secr3tP")

    def test_verify_matches(self, hasher: SecretHasher) -> None:
        assert hasher.verify("Secr3tP", hasher.hash("Secr3tP")) is True

    def test_verify_rejects_wrong_password(self, hasher: SecretHasher) -> None:
        assert hasher.verify("Wr0ng", hasher.hash("Secr3tP")) is False

    def test_verify_rejects_malformed_hash(self, hasher: SecretHasher) -> None:
        assert hasher.verify("Secr3tP", "not-a-bcrypt-hash") is False

    def test_low_cost_factor_rejected(self) -> None:
        with pytest.raises(ValueError):
            SecretHasher(rounds=4)

    def test_burn_returns_nothing(self, hasher: SecretHasher) -> None:
        assert hasher.burn("anything") is None

    def test_hash_rejects_input_over_72_bytes(self, hasher: SecretHasher) -> None:
        with pytest.raises(InvalidRequest, match="72 bytes"):
            hasher.hash("Aa1" + "é" * 40)

    def test_over_long_input_fails_closed_on_both_login_paths(
        self, hasher: SecretHasher
    ) -> None:
        over_long = "Aa1" + "é" * 40

        assert hasher.verify(over_long, hasher.hash("Secr3tP")) is False
        assert hasher.burn(over_long) is None
