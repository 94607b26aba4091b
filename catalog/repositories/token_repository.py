"""Repository for Token operations.

Tokens are stored as SHA-256 digests keyed by hash. A lookup always
includes the scope and the expiry, so a token of the wrong scope or past
its expiry is indistinguishable from one that never existed.
"""

from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.database import store_operation
from catalog.models.token import Token, TokenScope


class TokenRepository:
    """Stateless repository for Token table operations.

    All methods are static, no instance state.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        token_hash: bytes,
        user_id: int,
        expiry: datetime,
        scope: TokenScope,
    ) -> Token:
        """Store a new token digest.

        Args:
            db: Async database session.
            token_hash: SHA-256 digest of the plaintext.
            user_id: Owning user.
            expiry: Instant after which the token is invalid.
            scope: Token purpose.

        Returns:
            Created Token.
        """
        token = Token(
            hash=token_hash,
            user_id=user_id,
            expiry=expiry,
            scope=scope.value,
        )
        async with store_operation("Token.create"):
            db.add(token)
            await db.flush()
        # No server-generated fields to refresh
        return token

    @staticmethod
    async def get_live(
        db: AsyncSession,
        *,
        token_hash: bytes,
        scope: TokenScope,
        now: datetime | None = None,
    ) -> Token | None:
        """Look up an unexpired token of the given scope.

        Expiry is compared in SQL so the result does not depend on how the
        driver returns timestamps.

        Args:
            db: Async database session.
            token_hash: SHA-256 digest of the presented plaintext.
            scope: Required scope.
            now: Reference instant (defaults to the current UTC time).

        Returns:
            Token if found and live, None otherwise.
        """
        stmt = select(Token).where(
            Token.hash == token_hash,
            Token.scope == scope.value,
            Token.expiry > (now or datetime.now(UTC)),
        )
        async with store_operation("Token.get_live"):
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

    @staticmethod
    async def delete_all_for_user(
        db: AsyncSession,
        *,
        scope: TokenScope,
        user_id: int,
    ) -> int:
        """Delete every token of one scope belonging to a user.

        Args:
            db: Async database session.
            scope: Scope to revoke.
            user_id: Owning user.

        Returns:
            Number of deleted rows (0 is not an error).
        """
        stmt = delete(Token).where(
            Token.scope == scope.value,
            Token.user_id == user_id,
        )
        async with store_operation("Token.delete_all_for_user"):
            result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count

    @staticmethod
    async def delete_expired(db: AsyncSession, now: datetime | None = None) -> int:
        """Delete all expired tokens (periodic cleanup).

        Args:
            db: Async database session.
            now: Reference instant (defaults to the current UTC time).

        Returns:
            Number of deleted rows.
        """
        stmt = delete(Token).where(Token.expiry <= (now or datetime.now(UTC)))
        async with store_operation("Token.delete_expired"):
            result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count
