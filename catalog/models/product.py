"""Product model - catalog entries.

avg_rating is derived from the reviews table and recomputed by
ReviewRepository after every review write.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.models.base import Base, VersionedMixin

if TYPE_CHECKING:
    from catalog.models.review import Review


class Product(Base, VersionedMixin):
    """A product in the catalog.

    Attributes:
        name: Product name (max 100 chars).
        description: Short description (max 500 chars).
        category: Free-text category.
        image_url: Link to the product image (max 255 chars).
        price: Display price as text (max 10 chars).
        avg_rating: Average review rating, 0 when unreviewed.
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(Text(), nullable=False)
    image_url: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[str] = mapped_column(String(10), nullable=False)
    avg_rating: Mapped[Decimal] = mapped_column(
        Numeric(3, 2),
        nullable=False,
        server_default=text("0"),
    )

    # Deletes go through a Core DELETE, so the FK's ON DELETE CASCADE does the work
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="product",
        passive_deletes=True,
    )
