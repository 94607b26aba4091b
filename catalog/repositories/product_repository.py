"""Repository for Product operations.

Products are listed with optional free-text filters on name and category.
avg_rating is never written here; ReviewRepository maintains it.
"""

from catalog.models.product import Product
from catalog.repositories.versioned import VersionedRepository


class ProductRepository(VersionedRepository[Product]):
    """Versioned store for the products table."""

    model = Product
    resource = "Product"
    updatable_fields = frozenset(
        {"name", "description", "category", "image_url", "price"}
    )
    search_columns = frozenset({"name", "category"})
