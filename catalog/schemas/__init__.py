"""Pydantic request/response schemas for API endpoints."""

from catalog.schemas.product import (
    CreateProductRequest,
    ProductResponse,
    UpdateProductRequest,
)
from catalog.schemas.review import (
    CreateReviewRequest,
    ReviewResponse,
    UpdateReviewRequest,
)
from catalog.schemas.user import (
    ActivateUserRequest,
    ActivationTokenRequest,
    AuthenticationTokenRequest,
    RegisterUserRequest,
    TokenResponse,
    UserResponse,
)

__all__ = [
    # Products
    "CreateProductRequest",
    "ProductResponse",
    "UpdateProductRequest",
    # Reviews
    "CreateReviewRequest",
    "ReviewResponse",
    "UpdateReviewRequest",
    # Users and tokens
    "ActivateUserRequest",
    "ActivationTokenRequest",
    "AuthenticationTokenRequest",
    "RegisterUserRequest",
    "TokenResponse",
    "UserResponse",
]
