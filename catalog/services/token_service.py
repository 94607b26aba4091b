"""Bearer token lifecycle: mint, validate, revoke.

Tokens are 16 random bytes rendered as unpadded base32 (26 characters from
A-Z and 2-7). Only the SHA-256 digest is stored. The plaintext exists in
exactly one place after issuance: the IssuedToken returned to the caller,
which hands it out once.

Scope is part of a token's identity. A token minted for activation never
validates for authentication and vice versa.
"""

import base64
import hashlib
import hmac
import logging
import re
import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.errors import (
    InvalidTokenError,
    MalformedTokenError,
    TokenGenerationError,
)
from catalog.models.token import TokenScope
from catalog.repositories.token_repository import TokenRepository

logger = logging.getLogger(__name__)

TOKEN_ENTROPY_BYTES = 16
TOKEN_PLAINTEXT_LENGTH = 26

_TOKEN_PATTERN = re.compile(rf"^[A-Z2-7]{{{TOKEN_PLAINTEXT_LENGTH}}}$")


def digest(plaintext: str) -> bytes:
    """SHA-256 digest of a token plaintext, as stored in tokens.hash."""
    return hashlib.sha256(plaintext.encode()).digest()


def check_format(plaintext: str) -> None:
    """Reject a token that cannot possibly be valid without touching the store.

    Raises:
        MalformedTokenError: If plaintext is not 26 base32 characters.
    """
    if len(plaintext) != TOKEN_PLAINTEXT_LENGTH:
        raise MalformedTokenError(f"must be {TOKEN_PLAINTEXT_LENGTH} characters long")
    if not _TOKEN_PATTERN.match(plaintext):
        raise MalformedTokenError("must contain only the characters A-Z and 2-7")


def _generate_plaintext() -> str:
    try:
        raw = secrets.token_bytes(TOKEN_ENTROPY_BYTES)
    except (OSError, NotImplementedError) as exc:
        logger.error("Secure random source unavailable: %s", type(exc).__name__)
        raise TokenGenerationError() from exc
    return base64.b32encode(raw).decode("ascii").rstrip("=")


@dataclass(repr=False)
class IssuedToken:
    """A freshly minted token.

    The plaintext can be taken out exactly once with reveal(). Afterwards
    the object still describes the token (owner, scope, expiry) but can no
    longer leak it.

    Attributes:
        user_id: Owning user.
        scope: Token purpose.
        expiry: Instant after which the token is rejected.
    """

    user_id: int
    scope: TokenScope
    expiry: datetime
    _plaintext: str | None = field(default=None)

    def reveal(self) -> str:
        """Take the plaintext out of this token.

        Raises:
            RuntimeError: If the plaintext was already revealed.
        """
        if self._plaintext is None:
            msg = "Token plaintext has already been revealed"
            raise RuntimeError(msg)
        plaintext, self._plaintext = self._plaintext, None
        return plaintext

    @property
    def revealed(self) -> bool:
        return self._plaintext is None

    def __repr__(self) -> str:
        return (
            f"IssuedToken(user_id={self.user_id}, scope={self.scope.value!r}, "
            f"expiry={self.expiry.isoformat()!r}, plaintext=<redacted>)"
        )

    __str__ = __repr__


class TokenService:
    """Stateless token operations.

    All methods are static. Pass an AsyncSession for every call so the
    caller controls transaction boundaries.
    """

    @staticmethod
    async def new(
        db: AsyncSession,
        user_id: int,
        ttl: timedelta,
        scope: TokenScope,
    ) -> IssuedToken:
        """Mint and persist a token.

        Args:
            db: Async database session.
            user_id: Owning user.
            ttl: Lifetime from now.
            scope: Token purpose.

        Returns:
            IssuedToken carrying the only copy of the plaintext.

        Raises:
            TokenGenerationError: If the secure random source fails.
        """
        plaintext = _generate_plaintext()
        expiry = datetime.now(UTC) + ttl
        await TokenRepository.create(
            db,
            token_hash=digest(plaintext),
            user_id=user_id,
            expiry=expiry,
            scope=scope,
        )
        logger.info("Issued %s token for user %d", scope.value, user_id)
        return IssuedToken(
            user_id=user_id, scope=scope, expiry=expiry, _plaintext=plaintext
        )

    @staticmethod
    async def validate(db: AsyncSession, scope: TokenScope, plaintext: str) -> int:
        """Resolve a presented token to its owner.

        Args:
            db: Async database session.
            scope: Scope the calling operation requires.
            plaintext: Token as presented by the client.

        Returns:
            The owning user's id.

        Raises:
            MalformedTokenError: If the plaintext fails the format check.
            InvalidTokenError: If no live token of this scope matches.
        """
        check_format(plaintext)

        presented = digest(plaintext)
        token = await TokenRepository.get_live(db, token_hash=presented, scope=scope)
        if token is None or not hmac.compare_digest(token.hash, presented):
            raise InvalidTokenError()
        return token.user_id

    @staticmethod
    async def revoke_all(db: AsyncSession, scope: TokenScope, user_id: int) -> int:
        """Delete every token of one scope for a user.

        Returns:
            Number of tokens revoked.
        """
        revoked = await TokenRepository.delete_all_for_user(
            db, scope=scope, user_id=user_id
        )
        logger.info("Revoked %d %s token(s) for user %d", revoked, scope.value, user_id)
        return revoked

    @staticmethod
    async def purge_expired(db: AsyncSession) -> int:
        """Delete all expired tokens.

        Returns:
            Number of tokens removed.
        """
        purged = await TokenRepository.delete_expired(db)
        if purged:
            logger.info("Purged %d expired token(s)", purged)
        return purged
