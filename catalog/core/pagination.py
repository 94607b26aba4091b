"""Pagination utilities.

Offset pagination with hard ceilings: page between 1 and 500, page_size
between 1 and 100. The page ceiling caps worst-case OFFSET scan cost; the
page_size ceiling caps response size.

Listing flow:
    query params -> PageRequest.validate() -> repository list(limit, offset)
    -> (rows, total) -> PageMetadata.compute(total, page, page_size)
"""

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Query
from pydantic import BaseModel, model_serializer

from catalog.core.errors import ValidationError
from catalog.core.sorting import SortSpec, is_permitted, resolve

MAX_PAGE = 500
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageRequest:
    """Pagination and sort request for one listing.

    Attributes:
        page: Current page number (1-indexed).
        page_size: Number of items per page.
        sort: Sort token, optionally prefixed with `-` for descending.
        safelist: Sort tokens this resource permits.
    """

    page: int
    page_size: int
    sort: str
    safelist: tuple[str, ...]

    def errors(self) -> list[dict]:
        """Collect field errors for out-of-range values and unsafe sort.

        Returns:
            List of {"field", "message"} dicts; empty when valid.
        """
        errors: list[dict] = []
        if self.page < 1:
            errors.append({"field": "page", "message": "must be greater than zero"})
        if self.page > MAX_PAGE:
            errors.append({"field": "page", "message": f"must not exceed {MAX_PAGE}"})
        if self.page_size < 1:
            errors.append(
                {"field": "page_size", "message": "must be greater than zero"}
            )
        if self.page_size > MAX_PAGE_SIZE:
            errors.append(
                {"field": "page_size", "message": f"must not exceed {MAX_PAGE_SIZE}"}
            )
        if not is_permitted(self.sort, self.safelist):
            errors.append({"field": "sort", "message": "invalid sort value"})
        return errors

    def validate(self) -> "PageRequest":
        """Validate bounds and sort token.

        Returns:
            self, so calls can be chained.

        Raises:
            ValidationError: With one detail per violated rule.
        """
        errors = self.errors()
        if errors:
            raise ValidationError("Invalid pagination or sort parameters", details=errors)
        return self

    @property
    def limit(self) -> int:
        """Calculate SQL LIMIT for database queries.

        Returns:
            Maximum number of items to return (same as page_size).
        """
        return self.page_size

    @property
    def offset(self) -> int:
        """Calculate SQL OFFSET for database queries.

        Returns:
            Number of items to skip (0 for page 1).
        """
        return (self.page - 1) * self.page_size

    def sort_spec(self) -> SortSpec:
        """Resolve the sort token against the safelist.

        Raises:
            UnsafeSortInputError: If the token is not safelisted.
        """
        return resolve(self.sort, self.safelist)


class PageMetadata(BaseModel):
    """Pagination metadata for collections.

    Serializes to {} when there are no records.

    Attributes:
        current_page: Page that was returned.
        page_size: Items per page.
        first_page: Always 1 when there are records.
        last_page: Number of pages needed for all records.
        total_records: Total matching rows across all pages.
    """

    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    @classmethod
    def compute(cls, total_records: int, page: int, page_size: int) -> "PageMetadata":
        """Build metadata from a total row count.

        Pure: depends only on its arguments.

        Args:
            total_records: Total matching rows.
            page: Current page number.
            page_size: Items per page.

        Returns:
            PageMetadata; all zero when total_records is 0.
        """
        if total_records == 0:
            return cls()
        return cls(
            current_page=page,
            page_size=page_size,
            first_page=1,
            last_page=(total_records + page_size - 1) // page_size,
            total_records=total_records,
        )

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: Callable[["PageMetadata"], dict]) -> dict:
        return {key: value for key, value in handler(self).items() if value}


def _parse_int(raw: str | None, default: int, field: str, errors: list[dict]) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        errors.append({"field": field, "message": "must be an integer value"})
        return default


def page_request_params(
    safelist: tuple[str, ...],
    default_sort: str = "id",
) -> Callable[..., PageRequest]:
    """Build a FastAPI dependency that parses and validates pagination.

    Usage:
        _PRODUCT_PAGE = page_request_params(PRODUCT_SORT_SAFELIST)

        @router.get("")
        async def list_products(
            page: Annotated[PageRequest, Depends(_PRODUCT_PAGE)],
        ):
            ...

    Args:
        safelist: Permitted sort tokens for the resource.
        default_sort: Sort used when the client sends none.

    Returns:
        Dependency callable returning a validated PageRequest.
    """

    def dependency(
        page: str | None = Query(default=None, description="Page number (1-500)"),
        page_size: str | None = Query(
            default=None, description="Items per page (1-100)"
        ),
        sort: str | None = Query(
            default=None,
            description="Sort column. Use `-` prefix for descending.",
        ),
    ) -> PageRequest:
        errors: list[dict] = []
        request = PageRequest(
            page=_parse_int(page, 1, "page", errors),
            page_size=_parse_int(page_size, DEFAULT_PAGE_SIZE, "page_size", errors),
            sort=sort or default_sort,
            safelist=safelist,
        )
        errors.extend(request.errors())
        if errors:
            raise ValidationError(
                "Invalid pagination or sort parameters", details=errors
            )
        return request

    return dependency
