"""Products API router.

Endpoints:
- /products - List (search by name/category, paginate, sort) and create
- /products/{id} - Fetch, partial update, delete
- /products/{id}/reviews - All reviews of one product
- /products/{id}/reviews/{review_id} - One review scoped to its product

Writes require an activated user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from catalog.api.deps import ActivatedUser, DbSession, ExpectedVersion
from catalog.core.errors import NotFoundError
from catalog.core.pagination import PageMetadata, PageRequest, page_request_params
from catalog.core.responses import DataResponse, ListResponse
from catalog.core.sorting import with_descending
from catalog.models.product import Product
from catalog.repositories.product_repository import ProductRepository
from catalog.repositories.review_repository import ReviewRepository
from catalog.schemas.product import (
    CreateProductRequest,
    ProductResponse,
    UpdateProductRequest,
)
from catalog.schemas.review import ReviewResponse

router = APIRouter()

PRODUCT_SORT_SAFELIST = with_descending("id", "name", "category", "avg_rating")

ProductPage = Annotated[PageRequest, Depends(page_request_params(PRODUCT_SORT_SAFELIST))]


@router.get("")
async def list_products(
    db: DbSession,
    page: ProductPage,
    name: str | None = None,
    category: str | None = None,
) -> ListResponse[ProductResponse]:
    """List products.

    ``name`` and ``category`` match case-insensitively as substrings;
    omitted filters match everything.
    """
    rows, total = await ProductRepository.list(
        db, page=page, search={"name": name, "category": category}
    )
    return ListResponse(
        data=[ProductResponse.model_validate(row) for row in rows],
        meta=PageMetadata.compute(total, page.page, page.page_size),
    )


@router.post("", status_code=201)
async def create_product(
    body: CreateProductRequest,
    response: Response,
    db: DbSession,
    _user: ActivatedUser,
) -> DataResponse[ProductResponse]:
    """Create a product. Sets a Location header for the new resource."""
    product = await ProductRepository.insert(db, Product(**body.model_dump()))
    await db.commit()
    response.headers["Location"] = f"/api/v1/products/{product.id}"
    return DataResponse(data=ProductResponse.model_validate(product))


@router.get("/{product_id}")
async def get_product(product_id: int, db: DbSession) -> DataResponse[ProductResponse]:
    """Get a product by ID."""
    product = await ProductRepository.fetch(db, product_id)
    return DataResponse(data=ProductResponse.model_validate(product))


@router.patch("/{product_id}")
async def update_product(
    product_id: int,
    body: UpdateProductRequest,
    db: DbSession,
    _user: ActivatedUser,
    expected_version: ExpectedVersion,
) -> DataResponse[ProductResponse]:
    """Partially update a product.

    The write is conditional on the version the handler read, or on the
    X-Expected-Version header when the client sends one. A mismatch
    returns 409 EDIT_CONFLICT.
    """
    product = await ProductRepository.fetch(db, product_id)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)

    await ProductRepository.update(
        db, product, expected_version=expected_version or product.version
    )
    await db.commit()
    return DataResponse(data=ProductResponse.model_validate(product))


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    db: DbSession,
    _user: ActivatedUser,
) -> None:
    """Delete a product and, by cascade, its reviews."""
    await ProductRepository.delete(db, product_id)
    await db.commit()


# =============================================================================
# Product-scoped reviews
# =============================================================================


@router.get("/{product_id}/reviews")
async def list_product_reviews(
    product_id: int, db: DbSession
) -> DataResponse[list[ReviewResponse]]:
    """List every review of a product, oldest first."""
    if not await ProductRepository.exists(db, product_id):
        raise NotFoundError("Product", product_id)

    reviews = await ReviewRepository.list_for_product(db, product_id)
    return DataResponse(data=[ReviewResponse.model_validate(r) for r in reviews])


@router.get("/{product_id}/reviews/{review_id}")
async def get_product_review(
    product_id: int, review_id: int, db: DbSession
) -> DataResponse[ReviewResponse]:
    """Get one review, only if it belongs to the product."""
    review = await ReviewRepository.fetch_for_product(db, review_id, product_id)
    return DataResponse(data=ReviewResponse.model_validate(review))
