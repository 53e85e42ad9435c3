"""Tests for the health endpoints."""

import pytest


@pytest.mark.api
class TestHealthAPI:

    @pytest.mark.asyncio
    async def test_health(self, client, offline_redis):
        response = await client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"]["database"]["status"] == "healthy"
        assert body["components"]["redis"]["status"] == "unavailable"

    @pytest.mark.asyncio
    async def test_readiness(self, client):
        response = await client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json() == {"ready": True, "components": {"api": True, "database": True}}

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/api/health/live")

        assert response.status_code == 200
        assert response.json() == {"alive": True}

    @pytest.mark.asyncio
    async def test_request_id_header(self, client):
        response = await client.get("/api/health/live", headers={"X-Request-ID": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"
