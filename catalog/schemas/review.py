"""Review request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateReviewRequest(BaseModel):
    """Request body for POST /reviews."""

    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(gt=0)
    author: str = Field(min_length=1, max_length=25)
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)


class UpdateReviewRequest(BaseModel):
    """Request body for PATCH /reviews/{id}.

    A review cannot move to another product; omitted or null fields keep
    their stored value.
    """

    model_config = ConfigDict(extra="forbid")

    author: str | None = Field(None, min_length=1, max_length=25)
    rating: int | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, min_length=1)


class ReviewResponse(BaseModel):
    """Review as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    author: str
    rating: int
    comment: str
    helpful_count: int
    created_at: datetime
    version: int
