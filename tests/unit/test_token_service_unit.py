"""Unit tests for TokenService that need no database."""

import base64
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from catalog.core.errors import MalformedTokenError, TokenGenerationError
from catalog.models.token import TokenScope
from catalog.services import token_service
from catalog.services.token_service import (
    TOKEN_PLAINTEXT_LENGTH,
    IssuedToken,
    TokenService,
    check_format,
    digest,
)


class TestPlaintextFormat:
    def test_generated_plaintext_is_26_base32_characters(self):
        plaintext = token_service._generate_plaintext()
        assert len(plaintext) == TOKEN_PLAINTEXT_LENGTH
        check_format(plaintext)

    def test_plaintext_decodes_to_16_bytes(self):
        plaintext = token_service._generate_plaintext()
        assert len(base64.b32decode(plaintext + "======")) == 16

    def test_plaintexts_are_unique(self):
        assert len({token_service._generate_plaintext() for _ in range(100)}) == 100

    @pytest.mark.parametrize(
        "plaintext",
        [
            "",
            "A" * 25,
            "A" * 27,
            "a" * 26,  # lower case
            "A" * 25 + "1",  # 1 is not in the base32 alphabet
            "A" * 25 + "=",
        ],
    )
    def test_malformed_plaintext_is_rejected(self, plaintext):
        with pytest.raises(MalformedTokenError):
            check_format(plaintext)

    def test_digest_is_sha256(self):
        assert len(digest("A" * 26)) == 32
        assert digest("A" * 26) == digest("A" * 26)
        assert digest("A" * 26) != digest("B" * 26)


class TestGenerationFailure:
    async def test_random_source_failure_raises_and_persists_nothing(self):
        db = MagicMock()
        with (
            patch.object(token_service.secrets, "token_bytes", side_effect=OSError),
            patch.object(token_service.TokenRepository, "create", AsyncMock()) as create,
            pytest.raises(TokenGenerationError),
        ):
            await TokenService.new(db, 1, timedelta(hours=1), TokenScope.ACTIVATION)
        create.assert_not_awaited()


class TestValidateFastPath:
    async def test_malformed_token_never_reaches_the_store(self):
        """A session double with no behaviour proves no query was issued."""
        db = MagicMock()
        db.execute = AsyncMock()
        with pytest.raises(MalformedTokenError):
            await TokenService.validate(db, TokenScope.AUTHENTICATION, "too-short")
        db.execute.assert_not_awaited()


class TestIssuedToken:
    def _token(self) -> IssuedToken:
        return IssuedToken(
            user_id=42,
            scope=TokenScope.AUTHENTICATION,
            expiry=datetime(2030, 1, 1, tzinfo=UTC),
            _plaintext="ABCDEFGHIJKLMNOPQRSTUVWXYZ",
        )

    def test_reveal_returns_plaintext_once(self):
        token = self._token()
        assert not token.revealed
        assert token.reveal() == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
        assert token.revealed
        with pytest.raises(RuntimeError, match="already been revealed"):
            token.reveal()

    def test_repr_never_shows_plaintext(self):
        token = self._token()
        assert "ABCDEFGHIJKLMNOPQRSTUVWXYZ" not in repr(token)
        assert "ABCDEFGHIJKLMNOPQRSTUVWXYZ" not in str(token)
        assert "<redacted>" in repr(token)
