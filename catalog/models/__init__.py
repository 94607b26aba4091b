"""SQLAlchemy ORM models for the catalog API.

All models are exported from this module for convenient imports:
    from catalog.models import Product, Review, User, Token

Models are organized by domain:
- product.py: Product (Tier 0)
- user.py: User (Tier 0)
- review.py: Review (Tier 1 - depends on products)
- token.py: Token, TokenScope (Tier 1 - depends on users)
"""

from catalog.models.base import Base, VersionedMixin
from catalog.models.product import Product
from catalog.models.review import Review
from catalog.models.token import Token, TokenScope
from catalog.models.user import User

__all__ = [
    # Base classes
    "Base",
    "VersionedMixin",
    # Tier 0
    "Product",
    "User",
    # Tier 1
    "Review",
    "Token",
    "TokenScope",
]
