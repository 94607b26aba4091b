"""Tests for password hashing and validation helpers."""

import pytest

from catalog.core.auth import (
    hash_password,
    validate_password_strength,
    verify_password,
)
from catalog.core.errors import ValidationError

_FAST_ROUNDS = 4


class TestValidatePasswordStrength:
    def test_accepts_eight_bytes(self):
        validate_password_strength("12345678")

    def test_accepts_seventy_two_bytes(self):
        validate_password_strength("a" * 72)

    def test_rejects_short_password(self):
        with pytest.raises(ValidationError, match="at least 8 bytes"):
            validate_password_strength("1234567")

    def test_rejects_long_password(self):
        with pytest.raises(ValidationError, match="more than 72 bytes"):
            validate_password_strength("a" * 73)

    def test_length_is_measured_in_bytes(self):
        """Twenty-five 3-byte characters are 75 bytes, over the limit."""
        with pytest.raises(ValidationError):
            validate_password_strength("€" * 25)


class TestHashing:
    def test_round_trip(self):
        hashed = hash_password("correct horse", rounds=_FAST_ROUNDS)
        assert hashed.startswith("$2b$04$")
        assert verify_password("correct horse", hashed)

    def test_wrong_password_fails(self):
        hashed = hash_password("correct horse", rounds=_FAST_ROUNDS)
        assert not verify_password("battery staple", hashed)

    def test_missing_hash_never_verifies(self):
        assert verify_password("anything at all", None) is False

    def test_password_over_72_bytes_fails_without_raising(self):
        hashed = hash_password("a" * 72, rounds=_FAST_ROUNDS)
        assert verify_password("a" * 100, hashed) is False

    def test_multibyte_password_over_limit_fails_for_unknown_account(self):
        """Sixty 2-byte characters are 120 bytes."""
        assert verify_password("é" * 60, None) is False
