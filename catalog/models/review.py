"""Review model - product reviews.

Tier 1: depends on products. Rows are removed with their product
(ON DELETE CASCADE).
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.models.base import Base, BigIntId, VersionedMixin

if TYPE_CHECKING:
    from catalog.models.product import Product


class Review(Base, VersionedMixin):
    """A review of a product.

    Attributes:
        product_id: Reviewed product.
        author: Display name of the reviewer (max 25 chars).
        rating: Integer rating between 1 and 5.
        comment: Review text.
        helpful_count: Number of "helpful" votes.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )

    product_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author: Mapped[str] = mapped_column(String(25), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text(), nullable=False)
    helpful_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text("0"),
    )

    product: Mapped["Product"] = relationship("Product", back_populates="reviews")
