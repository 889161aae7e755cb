"""
Tests for the catalog endpoints (/api/products, /api/categories).
"""

import pytest


def product_payload(n, **overrides):
    payload = {
        "name": f"Krem {n}",
        "sku": f"KR-{n}",
        "slug": f"krem-{n}",
        "description": "Nawilzajacy krem do twarzy",
        "price": "100.00",
        "stock": 5,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def category(client):
    response = client.post("/api/categories", json={"name": "Twarz", "slug": "twarz"})
    assert response.status_code == 201
    return response.json()


class TestCategories:

    def test_crud(self, client, category):
        assert client.get(f"/api/categories/{category['id']}").json()["slug"] == "twarz"
        assert client.get("/api/categories/slug/twarz").json()["id"] == category["id"]

        updated = client.put(f"/api/categories/{category['id']}", json={"name": "Pielegnacja"})
        assert updated.json()["name"] == "Pielegnacja"

        assert client.delete(f"/api/categories/{category['id']}").status_code == 204
        assert client.get(f"/api/categories/{category['id']}").status_code == 404

    def test_duplicate_slug(self, client, category):
        response = client.post("/api/categories", json={"name": "Inna", "slug": "twarz"})
        assert response.status_code == 409

    def test_delete_with_products_conflicts(self, client, category):
        client.post("/api/products", json=product_payload(1, categoryId=category["id"]))

        assert client.delete(f"/api/categories/{category['id']}").status_code == 409

    def test_invalid_slug_format(self, client):
        response = client.post("/api/categories", json={"name": "X", "slug": "Zla Nazwa"})
        assert response.status_code == 422


class TestProducts:

    def test_create_get_update_delete(self, client, category):
        created = client.post("/api/products", json=product_payload(1, categoryId=category["id"]))
        assert created.status_code == 201
        product = created.json()
        assert product["categoryId"] == category["id"]

        assert client.get(f"/api/products/{product['id']}").json()["sku"] == "KR-1"
        assert client.get("/api/products/slug/krem-1").json()["id"] == product["id"]

        updated = client.put(f"/api/products/{product['id']}", json={"price": "80.00", "featured": True})
        assert updated.status_code == 200
        assert updated.json()["featured"] is True

        assert client.delete(f"/api/products/{product['id']}").status_code == 204
        assert client.get(f"/api/products/{product['id']}").status_code == 404

    @pytest.mark.parametrize("field", ["slug", "sku"])
    def test_unique_fields_conflict(self, client, field):
        client.post("/api/products", json=product_payload(1))
        clash = product_payload(2, **{field: product_payload(1)[field]})

        assert client.post("/api/products", json=clash).status_code == 409

    def test_unknown_category(self, client):
        response = client.post("/api/products", json=product_payload(1, categoryId=999))
        assert response.status_code == 400

    def test_missing_product(self, client):
        assert client.get("/api/products/999").status_code == 404
        assert client.get("/api/products/slug/nie-ma").status_code == 404


class TestProductListing:

    @pytest.fixture
    def listing(self, client, category):
        client.post("/api/products", json=product_payload(1, price="10.00", categoryId=category["id"], featured=True))
        client.post("/api/products", json=product_payload(2, price="50.00", name="Serum", bestseller=True))
        client.post("/api/products", json=product_payload(3, price="90.00", categoryId=category["id"], isNew=True))

    def test_pagination(self, client, listing):
        body = client.get("/api/products", params={"limit": 2, "page": 2, "sort": "price_asc"}).json()
        assert body["total"] == 3
        assert body["pages"] == 2
        assert [p["slug"] for p in body["items"]] == ["krem-3"]

    def test_sorting(self, client, listing):
        body = client.get("/api/products", params={"sort": "price_desc"}).json()
        assert [p["slug"] for p in body["items"]] == ["krem-3", "krem-2", "krem-1"]

    def test_filter_by_category(self, client, listing, category):
        by_id = client.get("/api/products", params={"categoryId": category["id"]}).json()
        by_slug = client.get("/api/products", params={"category": "twarz"}).json()
        assert by_id["total"] == by_slug["total"] == 2

    def test_filter_by_collection(self, client, listing):
        body = client.get("/api/products", params={"collection": "bestseller"}).json()
        assert [p["name"] for p in body["items"]] == ["Serum"]

    def test_filter_by_price_and_search(self, client, listing):
        body = client.get("/api/products", params={"minPrice": "20", "maxPrice": "95"}).json()
        assert {p["slug"] for p in body["items"]} == {"krem-2", "krem-3"}

        body = client.get("/api/products", params={"search": "serum"}).json()
        assert body["total"] == 1

    @pytest.mark.parametrize(
        "params",
        [
            {"page": 0},
            {"limit": 0},
            {"limit": 101},
            {"sort": "popular"},
            {"collection": "sale"},
            {"minPrice": "50", "maxPrice": "10"},
        ],
    )
    def test_invalid_query(self, client, params):
        assert client.get("/api/products", params=params).status_code == 400

    def test_empty_listing(self, client):
        body = client.get("/api/products").json()
        assert body == {"items": [], "total": 0, "page": 1, "limit": 20, "pages": 0}


class TestPartialUpdates:

    @pytest.fixture
    def product(self, client, category):
        body = product_payload(1, categoryId=category["id"], discountedPrice="90.00")
        return client.post("/api/products", json=body).json()

    @pytest.mark.parametrize("field", ["name", "sku", "slug", "price", "description", "stock"])
    def test_null_on_required_field_is_ignored(self, client, product, field):
        response = client.put(f"/api/products/{product['id']}", json={field: None})

        assert response.status_code == 200
        assert response.json()[field] == product[field]

    def test_null_clears_nullable_fields(self, client, product):
        response = client.put(
            f"/api/products/{product['id']}",
            json={"discountedPrice": None, "categoryId": None},
        )

        assert response.status_code == 200
        assert response.json()["discountedPrice"] is None
        assert response.json()["categoryId"] is None

    def test_category_null_name_is_ignored(self, client, category):
        response = client.put(
            f"/api/categories/{category['id']}",
            json={"name": None, "slug": None, "description": "Kremy i serum"},
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Twarz"
        assert response.json()["slug"] == "twarz"
        assert response.json()["description"] == "Kremy i serum"
