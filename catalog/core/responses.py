"""Response envelope models.

Consistent response format for all API endpoints:
- {"data": ...} for single resources
- {"data": [...], "meta": {...}} for collections
- {"error": {"code", "message", "details"}} for failures
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

from catalog.core.pagination import PageMetadata

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources.

    Usage:
        @router.get("/products/{product_id}")
        async def get_product(product_id: int) -> DataResponse[ProductOut]:
            product = await ProductRepository.fetch(db, product_id)
            return DataResponse(data=ProductOut.model_validate(product))
    """

    data: T


class ListResponse(BaseModel, Generic[T]):
    """Standard response envelope for collections.

    Usage:
        rows, total = await ProductRepository.list(db, search=..., page=page)
        return ListResponse(
            data=[ProductOut.model_validate(row) for row in rows],
            meta=PageMetadata.compute(total, page.page, page.page_size),
        )
    """

    data: list[T]
    meta: PageMetadata


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message)
            ).model_dump(),
        )
    """

    error: ErrorDetail
