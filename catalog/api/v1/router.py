"""API v1 router aggregator.

All v1 endpoint routers are included here, mounted at /api/v1.
"""

from fastapi import APIRouter

from catalog.api.v1 import health, products, reviews, tokens, users

router = APIRouter()

# =============================================================================
# Service
# =============================================================================

router.include_router(health.router, tags=["health"])

# =============================================================================
# Catalog Resources
# =============================================================================

router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])

# =============================================================================
# Accounts
# =============================================================================

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(tokens.router, prefix="/tokens", tags=["tokens"])
