"""
Tests for the /api/free-products admin endpoints.
"""

from decimal import Decimal


def create(client, product_id, min_order_value="500.00"):
    return client.post(
        "/api/free-products",
        json={"productId": product_id, "minOrderValue": min_order_value},
    )


class TestFreeProductRules:

    def test_create_and_list(self, client, make_product):
        gift = make_product("20.00", name="Gift")

        response = create(client, gift.id)
        assert response.status_code == 201
        body = response.json()
        assert body["productId"] == gift.id
        assert Decimal(body["minOrderValue"]) == Decimal("500.00")
        assert body["product"]["name"] == "Gift"

        listed = client.get("/api/free-products").json()
        assert [r["id"] for r in listed] == [body["id"]]

    def test_list_is_ordered_by_threshold(self, client, make_product):
        high = create(client, make_product().id, "1000.00").json()
        low = create(client, make_product().id, "100.00").json()

        listed = client.get("/api/free-products").json()
        assert [r["id"] for r in listed] == [low["id"], high["id"]]

    def test_get_and_404(self, client, make_product):
        rule = create(client, make_product().id).json()

        assert client.get(f"/api/free-products/{rule['id']}").json()["id"] == rule["id"]
        assert client.get("/api/free-products/999").status_code == 404

    def test_unknown_product(self, client):
        assert create(client, 4242).status_code == 404

    def test_duplicate_product_conflicts(self, client, make_product):
        gift = make_product()
        assert create(client, gift.id).status_code == 201
        assert create(client, gift.id, "900.00").status_code == 409

    def test_negative_threshold_is_rejected(self, client, make_product):
        assert create(client, make_product().id, "-1.00").status_code == 422

    def test_update(self, client, make_product):
        rule = create(client, make_product().id).json()

        response = client.put(f"/api/free-products/{rule['id']}", json={"minOrderValue": "750.00"})
        assert response.status_code == 200
        assert Decimal(response.json()["minOrderValue"]) == Decimal("750.00")

    def test_update_to_taken_product_conflicts(self, client, make_product):
        first = make_product()
        second = make_product()
        create(client, first.id)
        rule = create(client, second.id).json()

        response = client.put(f"/api/free-products/{rule['id']}", json={"productId": first.id})
        assert response.status_code == 409

    def test_delete(self, client, make_product):
        rule = create(client, make_product().id).json()

        assert client.delete(f"/api/free-products/{rule['id']}").status_code == 204
        assert client.delete(f"/api/free-products/{rule['id']}").status_code == 404
        assert client.get("/api/free-products").json() == []

    def test_rule_with_deleted_product_is_listed_without_product(self, client, make_product):
        gift = make_product()
        create(client, gift.id)

        client.delete(f"/api/products/{gift.id}")

        listed = client.get("/api/free-products").json()
        assert listed[0]["productId"] == gift.id
        assert listed[0]["product"] is None


class TestRuleChangeSideEffects:

    def test_writes_invalidate_cache_and_schedule_sweep(self, client, make_product, rule_cache, dispatcher):
        before = rule_cache.invalidations
        rule = create(client, make_product().id).json()
        client.put(f"/api/free-products/{rule['id']}", json={"minOrderValue": "10.00"})
        client.delete(f"/api/free-products/{rule['id']}")

        assert rule_cache.invalidations == before + 3
        assert dispatcher.calls == [None, None, None]

    def test_failed_write_changes_nothing(self, client, rule_cache, dispatcher):
        before = rule_cache.invalidations
        create(client, 4242)

        assert rule_cache.invalidations == before
        assert dispatcher.calls == []

    def test_new_threshold_applies_on_next_cart_read(self, client, make_product):
        paid = make_product("300.00")
        gift = make_product("5.00")
        cart = client.get("/api/cart", params={"sessionId": "s-rules"}).json()
        client.post("/api/cart/items", json={"cartId": cart["id"], "productId": paid.id, "quantity": 1})

        create(client, gift.id, "250.00")

        items = client.get("/api/cart", params={"sessionId": "s-rules"}).json()["items"]
        assert {i["productId"] for i in items if i["isFree"]} == {gift.id}
