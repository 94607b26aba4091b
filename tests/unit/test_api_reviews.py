"""Tests for the reviews API and product-scoped review routes."""

from httpx import AsyncClient

from catalog.models import Product

_REVIEWS_URL = "/api/v1/reviews"


def _review_body(product: Product, **fields) -> dict:
    body = {"product_id": product.id, "author": "sam", "rating": 4, "comment": "Solid"}
    body.update(fields)
    return body


async def _post_review(client: AsyncClient, headers, product: Product, **fields) -> dict:
    response = await client.post(
        _REVIEWS_URL, json=_review_body(product, **fields), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateReview:
    async def test_creates_review_and_updates_product_rating(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        await _post_review(client, auth_headers, test_product, rating=5)
        review = await _post_review(client, auth_headers, test_product, rating=2)

        assert review["helpful_count"] == 0
        assert review["version"] == 1
        product = (await client.get(f"/api/v1/products/{test_product.id}")).json()["data"]
        assert product["avg_rating"] == 3.5
        assert product["version"] == 1

    async def test_missing_product_is_404(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        body = {**_review_body(test_product), "product_id": 999}
        response = await client.post(_REVIEWS_URL, json=body, headers=auth_headers)
        assert response.status_code == 404

    async def test_rating_out_of_range_is_400(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        response = await client.post(
            _REVIEWS_URL, json=_review_body(test_product, rating=0), headers=auth_headers
        )
        assert response.status_code == 400

    async def test_author_too_long_is_400(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        response = await client.post(
            _REVIEWS_URL,
            json=_review_body(test_product, author="x" * 26),
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestUpdateAndDeleteReview:
    async def test_patch_changes_rating_and_refreshes_average(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        review = await _post_review(client, auth_headers, test_product, rating=1)

        response = await client.patch(
            f"{_REVIEWS_URL}/{review['id']}", json={"rating": 5}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["version"] == 2
        assert response.json()["data"]["comment"] == "Solid"
        product = (await client.get(f"/api/v1/products/{test_product.id}")).json()["data"]
        assert product["avg_rating"] == 5

    async def test_patch_cannot_move_review_to_another_product(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        review = await _post_review(client, auth_headers, test_product)
        response = await client.patch(
            f"{_REVIEWS_URL}/{review['id']}", json={"product_id": 2}, headers=auth_headers
        )
        assert response.status_code == 400

    async def test_delete_resets_average(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        review = await _post_review(client, auth_headers, test_product, rating=3)

        response = await client.delete(f"{_REVIEWS_URL}/{review['id']}", headers=auth_headers)

        assert response.status_code == 204
        product = (await client.get(f"/api/v1/products/{test_product.id}")).json()["data"]
        assert product["avg_rating"] == 0
        assert (await client.get(f"{_REVIEWS_URL}/{review['id']}")).status_code == 404


class TestHelpful:
    async def test_each_vote_increments_count_and_version(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        review = await _post_review(client, auth_headers, test_product)
        url = f"{_REVIEWS_URL}/{review['id']}/helpful"

        await client.patch(url, headers=auth_headers)
        response = await client.patch(url, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["helpful_count"] == 2
        assert response.json()["data"]["version"] == 3

    async def test_requires_authentication(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        review = await _post_review(client, auth_headers, test_product)
        response = await client.patch(f"{_REVIEWS_URL}/{review['id']}/helpful")
        assert response.status_code == 401


class TestListReviews:
    async def test_sort_by_rating_descending(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        for rating in (2, 5, 3):
            await _post_review(client, auth_headers, test_product, rating=rating)

        response = await client.get(f"{_REVIEWS_URL}?sort=-rating")

        assert [r["rating"] for r in response.json()["data"]] == [5, 3, 2]
        assert response.json()["meta"]["total_records"] == 3

    async def test_filter_by_author(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        await _post_review(client, auth_headers, test_product, author="Dana")
        await _post_review(client, auth_headers, test_product, author="Eli")

        response = await client.get(f"{_REVIEWS_URL}?author=dan")

        assert [r["author"] for r in response.json()["data"]] == ["Dana"]

    async def test_product_safelist_does_not_apply(self, client: AsyncClient):
        response = await client.get(f"{_REVIEWS_URL}?sort=name")
        assert response.status_code == 400


class TestProductScopedReviews:
    async def test_lists_reviews_of_one_product(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        first = await _post_review(client, auth_headers, test_product)
        second = await _post_review(client, auth_headers, test_product)

        response = await client.get(f"/api/v1/products/{test_product.id}/reviews")

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["data"]] == [first["id"], second["id"]]

    async def test_listing_for_missing_product_is_404(self, client: AsyncClient):
        response = await client.get("/api/v1/products/999/reviews")
        assert response.status_code == 404

    async def test_fetch_scoped_review(
        self, client: AsyncClient, auth_headers, test_product: Product
    ):
        review = await _post_review(client, auth_headers, test_product)

        ok = await client.get(f"/api/v1/products/{test_product.id}/reviews/{review['id']}")
        wrong = await client.get(f"/api/v1/products/999/reviews/{review['id']}")

        assert ok.status_code == 200
        assert wrong.status_code == 404
