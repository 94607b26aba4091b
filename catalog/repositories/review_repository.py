"""Repository for Review operations.

Every review write recomputes the parent product's avg_rating inside the
same transaction, so a caller reading the product right after a review
write sees the new average. The recompute does not bump the product
version: the average is derived data, not a product edit.
"""

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.database import store_operation
from catalog.core.errors import NotFoundError
from catalog.models.product import Product
from catalog.models.review import Review
from catalog.repositories.versioned import VersionedRepository


class ReviewRepository(VersionedRepository[Review]):
    """Versioned store for the reviews table."""

    model = Review
    resource = "Review"
    # product_id is fixed at insert; helpful_count moves only through
    # increment_helpful()
    updatable_fields = frozenset({"author", "rating", "comment"})
    search_columns = frozenset({"author"})

    @classmethod
    async def insert(cls, db: AsyncSession, entity: Review) -> Review:
        review = await super().insert(db, entity)
        await cls.recompute_product_rating(db, review.product_id)
        return review

    @classmethod
    async def update(
        cls,
        db: AsyncSession,
        entity: Review,
        *,
        expected_version: int | None = None,
    ) -> int:
        new_version = await super().update(
            db, entity, expected_version=expected_version
        )
        await cls.recompute_product_rating(db, entity.product_id)
        return new_version

    @classmethod
    async def delete(cls, db: AsyncSession, entity_id: int) -> None:
        """Delete a review and refresh its product's average rating.

        Raises:
            NotFoundError: If no review was deleted.
        """
        if entity_id < 1:
            raise NotFoundError(cls.resource, entity_id)

        stmt = (
            delete(Review)
            .where(Review.id == entity_id)
            .returning(Review.product_id)
            .execution_options(synchronize_session=False)
        )
        async with store_operation("Review.delete"):
            result = await db.execute(stmt)
            product_id = result.scalar_one_or_none()

        if product_id is None:
            raise NotFoundError(cls.resource, entity_id)
        await cls.recompute_product_rating(db, product_id)

    @classmethod
    async def increment_helpful(
        cls,
        db: AsyncSession,
        review_id: int,
        *,
        expected_version: int | None = None,
    ) -> Review:
        """Add one helpful vote to a review.

        Goes through the versioned write, so the version is bumped too.

        Args:
            db: Async database session.
            review_id: Review to vote for.
            expected_version: Optional version precondition.

        Returns:
            The refreshed review.

        Raises:
            NotFoundError: If the review does not exist.
            EditConflictError: If expected_version is stale.
        """
        await cls._versioned_write(
            db,
            review_id,
            {"helpful_count": Review.helpful_count + 1},
            expected_version=expected_version,
        )
        return await cls.fetch(db, review_id)

    @classmethod
    async def list_for_product(cls, db: AsyncSession, product_id: int) -> list[Review]:
        """List every review of a product, oldest first.

        Args:
            db: Async database session.
            product_id: Parent product.

        Returns:
            Reviews of the product; empty if none.

        Raises:
            NotFoundError: If product_id < 1.
        """
        if product_id < 1:
            raise NotFoundError("Product", product_id)

        stmt = (
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.id.asc())
        )
        async with store_operation("Review.list_for_product"):
            result = await db.execute(stmt)
            return list(result.scalars().all())

    @classmethod
    async def fetch_for_product(
        cls, db: AsyncSession, review_id: int, product_id: int
    ) -> Review:
        """Fetch a review only if it belongs to the given product.

        Raises:
            NotFoundError: If the pair does not match any review.
        """
        if review_id < 1 or product_id < 1:
            raise NotFoundError(cls.resource, review_id)

        stmt = (
            select(Review)
            .where(Review.id == review_id, Review.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        async with store_operation("Review.fetch_for_product"):
            result = await db.execute(stmt)
            review = result.scalar_one_or_none()

        if review is None:
            raise NotFoundError(cls.resource, review_id)
        return review

    @staticmethod
    async def recompute_product_rating(db: AsyncSession, product_id: int) -> None:
        """Set products.avg_rating to the rounded mean of its reviews.

        A product with no reviews gets 0.

        Args:
            db: Async database session.
            product_id: Product whose average to refresh.
        """
        average = (
            select(func.coalesce(func.round(func.avg(Review.rating), 2), 0))
            .where(Review.product_id == product_id)
            .scalar_subquery()
        )
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(avg_rating=average)
            .execution_options(synchronize_session=False)
        )
        async with store_operation("Product.recompute_rating"):
            await db.execute(stmt)
