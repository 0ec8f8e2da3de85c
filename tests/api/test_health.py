"""Tests for health and root endpoints."""

from kenpos.core.exceptions import DatabaseError


class TestHealth:
    async def test_health(self, api_client):
        response = await api_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"
        assert body["online"] is True

    async def test_request_id_header(self, api_client):
        response = await api_client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 12
        assert "X-Response-Time" in response.headers

    async def test_request_id_echoed(self, api_client):
        response = await api_client.get("/health", headers={"X-Request-ID": "till-7.req-42"})
        assert response.headers["X-Request-ID"] == "till-7.req-42"

    async def test_unusable_request_id_replaced(self, api_client):
        response = await api_client.get("/health", headers={"X-Request-ID": "bad id!"})
        assert response.headers["X-Request-ID"] != "bad id!"

    async def test_root(self, api_client):
        response = await api_client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "KenPOS"

    async def test_degraded_when_database_fails(self, api_client, store, monkeypatch):
        async def broken_get(collection, record_id):
            raise DatabaseError("get", "disk I/O error")

        monkeypatch.setattr(store, "get", broken_get)
        response = await api_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["database"] == "unavailable"
