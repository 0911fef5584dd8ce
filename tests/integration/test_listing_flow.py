"""Integration tests for rn_listing endpoints."""

import pytest

pytestmark = pytest.mark.asyncio


class TestUnauthenticated:
    async def test_search_requires_auth(self, seeded):
        resp = await seeded.get("/api/v1/listings")
        assert resp.status_code == 401


class TestSearchListings:
    async def test_default_newest_first(self, seeded, tenant_headers):
        resp = await seeded.get("/api/v1/listings", headers=tenant_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert [i["id"] for i in body["data"]["items"]] == ["lst_ln", "lst_ggn", "lst_cp"]

    async def test_radius_around_origin(self, seeded, tenant_headers):
        resp = await seeded.get(
            "/api/v1/listings",
            params={"lat": 28.6139, "lng": 77.2090, "radius_km": 10},
            headers=tenant_headers,
        )
        assert resp.status_code == 200
        items = resp.json()["data"]["items"]
        assert [i["id"] for i in items] == ["lst_cp"]
        assert items[0]["distance_display"].endswith("km")

    async def test_city_and_price_filter(self, seeded, tenant_headers):
        resp = await seeded.get(
            "/api/v1/listings",
            params={"city": "delhi", "max_price": 10000},
            headers=tenant_headers,
        )
        assert [i["id"] for i in resp.json()["data"]["items"]] == ["lst_ln"]

    async def test_bad_geo_query(self, seeded, tenant_headers):
        resp = await seeded.get(
            "/api/v1/listings", params={"lat": 28.6}, headers=tenant_headers
        )
        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 2002
        assert body["error_kind"] == "validation"


class TestGetListing:
    async def test_found(self, seeded, tenant_headers):
        resp = await seeded.get("/api/v1/listings/lst_cp", headers=tenant_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["monthly_price_display"] == "₹20,000"

    async def test_not_found(self, seeded, tenant_headers):
        resp = await seeded.get("/api/v1/listings/lst_missing", headers=tenant_headers)
        assert resp.status_code == 404
        assert resp.json()["error_kind"] == "not_found"


class TestHealth:
    async def test_health_reports_backend(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": "0.1.0", "backend": "memory"}

    async def test_request_id_echoed(self, client):
        resp = await client.get("/health", headers={"X-Request-ID": "req_from_client"})
        assert resp.headers["X-Request-ID"] == "req_from_client"
