"""Repository for User operations.

Users are versioned like every catalog resource, so activation and other
account edits go through the same optimistic-concurrency write.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.database import store_operation
from catalog.core.errors import ConflictError
from catalog.models.user import User
from catalog.repositories.versioned import VersionedRepository


class UserRepository(VersionedRepository[User]):
    """Versioned store for the users table."""

    model = User
    resource = "User"
    updatable_fields = frozenset(
        {"username", "email", "password_hash", "activated"}
    )

    @classmethod
    def constraint_error(cls, exc: IntegrityError) -> ConflictError:
        if "email" in str(exc.orig).lower():
            return ConflictError(
                code="DUPLICATE_EMAIL",
                message="a user with this email address already exists",
                details=[{"field": "email", "message": "already in use"}],
            )
        return super().constraint_error(exc)

    @classmethod
    async def insert(cls, db: AsyncSession, entity: User) -> User:
        """Insert a user with its email normalized to lowercase.

        Raises:
            ConflictError: DUPLICATE_EMAIL if the address is taken.
        """
        entity.email = entity.email.lower()
        return await super().insert(db, entity)

    @classmethod
    async def update(
        cls,
        db: AsyncSession,
        entity: User,
        *,
        expected_version: int | None = None,
    ) -> int:
        entity.email = entity.email.lower()
        return await super().update(db, entity, expected_version=expected_version)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Fetch a user by email address (case-insensitive).

        Args:
            db: Async database session.
            email: Email address to look up.

        Returns:
            User if found, None otherwise.
        """
        stmt = select(User).where(User.email == email.lower())
        async with store_operation("User.get_by_email"):
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
