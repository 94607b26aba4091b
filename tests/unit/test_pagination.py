"""Tests for pagination utilities."""

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from catalog.core.errors import APIError, ValidationError
from catalog.core.pagination import (
    DEFAULT_PAGE_SIZE,
    PageMetadata,
    PageRequest,
    page_request_params,
)
from catalog.core.sorting import with_descending
from catalog.main import api_error_handler

_SAFELIST = with_descending("id", "name")


def _page(page: int = 1, page_size: int = 10, sort: str = "id") -> PageRequest:
    return PageRequest(page=page, page_size=page_size, sort=sort, safelist=_SAFELIST)


class TestPageRequest:
    """Tests for PageRequest bounds, limit and offset."""

    def test_offset_page_one(self):
        assert _page(page=1, page_size=20).offset == 0

    def test_offset_calculation(self):
        assert _page(page=5, page_size=10).offset == 40

    def test_limit_equals_page_size(self):
        assert _page(page_size=15).limit == 15

    @pytest.mark.parametrize(
        ("page", "page_size"), [(1, 1), (500, 100), (250, 50)]
    )
    def test_values_within_bounds_are_valid(self, page, page_size):
        request = _page(page=page, page_size=page_size)
        assert request.validate() is request

    @pytest.mark.parametrize(
        ("page", "page_size", "field", "message"),
        [
            (0, 10, "page", "must be greater than zero"),
            (501, 10, "page", "must not exceed 500"),
            (1, 0, "page_size", "must be greater than zero"),
            (1, 101, "page_size", "must not exceed 100"),
        ],
    )
    def test_out_of_range_value_is_reported(self, page, page_size, field, message):
        with pytest.raises(ValidationError) as exc_info:
            _page(page=page, page_size=page_size).validate()
        assert exc_info.value.details == [{"field": field, "message": message}]

    def test_every_violated_rule_is_reported(self):
        errors = _page(page=0, page_size=1000, sort="price").errors()
        assert [e["field"] for e in errors] == ["page", "page_size", "sort"]

    def test_sort_spec_resolves_direction(self):
        spec = _page(sort="-name").sort_spec()
        assert spec.column == "name"
        assert spec.descending


class TestPageMetadata:
    """Tests for PageMetadata.compute()."""

    def test_zero_records_gives_empty_metadata(self):
        assert PageMetadata.compute(0, 3, 10) == PageMetadata()

    def test_empty_metadata_serializes_to_empty_object(self):
        assert PageMetadata.compute(0, 1, 10).model_dump() == {}

    def test_last_page_rounds_up(self):
        meta = PageMetadata.compute(101, 2, 10)
        assert meta.model_dump() == {
            "current_page": 2,
            "page_size": 10,
            "first_page": 1,
            "last_page": 11,
            "total_records": 101,
        }

    def test_exact_multiple_does_not_add_a_page(self):
        assert PageMetadata.compute(100, 1, 10).last_page == 10

    def test_single_record(self):
        meta = PageMetadata.compute(1, 1, 100)
        assert meta.first_page == 1
        assert meta.last_page == 1


class TestPageRequestParamsDependency:
    """Tests for page_request_params() through FastAPI."""

    @pytest.fixture
    async def client(self):
        app = FastAPI()
        app.add_exception_handler(APIError, api_error_handler)
        dependency = page_request_params(_SAFELIST)

        @app.get("/items")
        async def items(page: PageRequest = Depends(dependency)) -> dict:  # noqa: B008
            return {"page": page.page, "page_size": page.page_size, "sort": page.sort}

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    async def test_defaults(self, client):
        response = await client.get("/items")
        assert response.status_code == 200
        assert response.json() == {
            "page": 1,
            "page_size": DEFAULT_PAGE_SIZE,
            "sort": "id",
        }

    async def test_explicit_values(self, client):
        response = await client.get("/items?page=3&page_size=25&sort=-name")
        assert response.json() == {"page": 3, "page_size": 25, "sort": "-name"}

    async def test_non_integer_page_is_a_field_error(self, client):
        response = await client.get("/items?page=abc")
        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert {"field": "page", "message": "must be an integer value"} in body["details"]

    async def test_unsafe_sort_is_rejected(self, client):
        response = await client.get("/items?sort=password_hash")
        assert response.status_code == 400
        assert response.json()["error"]["details"] == [
            {"field": "sort", "message": "invalid sort value"}
        ]
