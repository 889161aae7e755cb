"""
Tests for the /api/banners admin endpoints.
"""

import pytest


def banner_payload(**overrides):
    payload = {
        "title": "Wyprzedaz",
        "alt": "Baner wyprzedazy",
        "desktopImageUrl": "/images/sale-desktop.jpg",
        "mobileImageUrl": "/images/sale-mobile.jpg",
    }
    payload.update(overrides)
    return payload


def create(client, **overrides):
    response = client.post("/api/banners", json=banner_payload(**overrides))
    assert response.status_code == 201
    return response.json()


class TestBanners:

    def test_create_defaults(self, client):
        banner = create(client)

        assert banner["enabled"] is True
        assert banner["position"] == 0
        assert banner["desktopImageUrl"] == "/images/sale-desktop.jpg"
        assert client.get(f"/api/banners/{banner['id']}").json() == banner

    def test_single_image_fills_both_variants(self, client):
        body = {"title": "Nowosci", "alt": "Nowosci", "imageUrl": "/images/new.jpg"}
        response = client.post("/api/banners", json=body)

        assert response.status_code == 201
        assert response.json()["desktopImageUrl"] == "/images/new.jpg"
        assert response.json()["mobileImageUrl"] == "/images/new.jpg"
        assert "imageUrl" not in response.json()

    @pytest.mark.parametrize("missing", ["desktopImageUrl", "mobileImageUrl"])
    def test_image_is_required(self, client, missing):
        body = banner_payload()
        del body[missing]

        assert client.post("/api/banners", json=body).status_code == 422

    def test_listing_is_ordered_by_position(self, client):
        last = create(client, title="C", position=5)
        first = create(client, title="A", position=1)
        hidden = create(client, title="B", position=2, enabled=False)

        all_ids = [b["id"] for b in client.get("/api/banners").json()]
        enabled_ids = [b["id"] for b in client.get("/api/banners", params={"enabled": True}).json()]

        assert all_ids == [first["id"], hidden["id"], last["id"]]
        assert enabled_ids == [first["id"], last["id"]]

    def test_update(self, client):
        banner = create(client, subtitle="Do -50%", linkUrl="/sale")

        response = client.put(
            f"/api/banners/{banner['id']}",
            json={"enabled": False, "title": None, "subtitle": None},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["enabled"] is False
        assert body["title"] == "Wyprzedaz"
        assert body["subtitle"] is None
        assert body["linkUrl"] == "/sale"

    def test_delete_and_missing(self, client):
        banner = create(client)

        assert client.delete(f"/api/banners/{banner['id']}").status_code == 204
        assert client.delete(f"/api/banners/{banner['id']}").status_code == 404
        assert client.get(f"/api/banners/{banner['id']}").status_code == 404
        assert client.put(f"/api/banners/{banner['id']}", json={"title": "X"}).status_code == 404
