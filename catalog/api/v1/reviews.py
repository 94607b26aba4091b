"""Reviews API router.

Endpoints:
- /reviews - List (search by author, paginate, sort) and create
- /reviews/{id} - Fetch, partial update, delete
- /reviews/{id}/helpful - Add one helpful vote

Every review write also refreshes the parent product's avg_rating.
Writes require an activated user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from catalog.api.deps import ActivatedUser, DbSession, ExpectedVersion
from catalog.core.errors import NotFoundError
from catalog.core.pagination import PageMetadata, PageRequest, page_request_params
from catalog.core.responses import DataResponse, ListResponse
from catalog.core.sorting import with_descending
from catalog.models.review import Review
from catalog.repositories.product_repository import ProductRepository
from catalog.repositories.review_repository import ReviewRepository
from catalog.schemas.review import (
    CreateReviewRequest,
    ReviewResponse,
    UpdateReviewRequest,
)

router = APIRouter()

REVIEW_SORT_SAFELIST = with_descending("id", "rating", "helpful_count", "created_at")

ReviewPage = Annotated[PageRequest, Depends(page_request_params(REVIEW_SORT_SAFELIST))]


@router.get("")
async def list_reviews(
    db: DbSession,
    page: ReviewPage,
    author: str | None = None,
) -> ListResponse[ReviewResponse]:
    """List reviews across all products."""
    rows, total = await ReviewRepository.list(db, page=page, search={"author": author})
    return ListResponse(
        data=[ReviewResponse.model_validate(row) for row in rows],
        meta=PageMetadata.compute(total, page.page, page.page_size),
    )


@router.post("", status_code=201)
async def create_review(
    body: CreateReviewRequest,
    db: DbSession,
    _user: ActivatedUser,
) -> DataResponse[ReviewResponse]:
    """Create a review for an existing product."""
    if not await ProductRepository.exists(db, body.product_id):
        raise NotFoundError("Product", body.product_id)

    review = await ReviewRepository.insert(db, Review(**body.model_dump()))
    await db.commit()
    return DataResponse(data=ReviewResponse.model_validate(review))


@router.get("/{review_id}")
async def get_review(review_id: int, db: DbSession) -> DataResponse[ReviewResponse]:
    """Get a review by ID."""
    review = await ReviewRepository.fetch(db, review_id)
    return DataResponse(data=ReviewResponse.model_validate(review))


@router.patch("/{review_id}")
async def update_review(
    review_id: int,
    body: UpdateReviewRequest,
    db: DbSession,
    _user: ActivatedUser,
    expected_version: ExpectedVersion,
) -> DataResponse[ReviewResponse]:
    """Partially update a review. Conditional on the version read."""
    review = await ReviewRepository.fetch(db, review_id)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(review, field, value)

    await ReviewRepository.update(
        db, review, expected_version=expected_version or review.version
    )
    await db.commit()
    return DataResponse(data=ReviewResponse.model_validate(review))


@router.patch("/{review_id}/helpful")
async def mark_review_helpful(
    review_id: int,
    db: DbSession,
    _user: ActivatedUser,
    expected_version: ExpectedVersion,
) -> DataResponse[ReviewResponse]:
    """Add one helpful vote. Bumps the review version."""
    review = await ReviewRepository.increment_helpful(
        db, review_id, expected_version=expected_version
    )
    await db.commit()
    return DataResponse(data=ReviewResponse.model_validate(review))


@router.delete("/{review_id}", status_code=204)
async def delete_review(
    review_id: int,
    db: DbSession,
    _user: ActivatedUser,
) -> None:
    """Delete a review."""
    await ReviewRepository.delete(db, review_id)
    await db.commit()
