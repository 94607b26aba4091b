"""Product request and response schemas.

Length limits mirror the products table columns.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateProductRequest(BaseModel):
    """Request body for POST /products."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1)
    image_url: str = Field(min_length=1, max_length=255)
    price: str = Field(default="", max_length=10)


class UpdateProductRequest(BaseModel):
    """Request body for PATCH /products/{id}.

    Omitted or null fields keep their stored value.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=500)
    category: str | None = Field(None, min_length=1)
    image_url: str | None = Field(None, min_length=1, max_length=255)
    price: str | None = Field(None, max_length=10)


class ProductResponse(BaseModel):
    """Product as returned by the API.

    Attributes:
        avg_rating: Mean review rating rounded to 2 places, 0 if unreviewed.
        version: Current version; send it back as X-Expected-Version to
            make an edit conditional on it.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    image_url: str
    price: str
    avg_rating: float
    created_at: datetime
    version: int
