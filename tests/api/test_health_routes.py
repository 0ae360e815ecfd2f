"""
Tests for the cache health endpoint.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from shopcache.api.routes import health_router
from shopcache.persistence.redis.redis_manager import RedisManager


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.include_router(health_router)
    return TestClient(app)


class TestCacheHealth:
    def test_healthy(self, client):
        response = client.get("/health/cache")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["redis"]["stores"]["session"] == {"status": "healthy", "database": 0}
        assert body["redis"]["stores"]["app"] == {"status": "healthy", "database": 1}

    def test_degraded(self, client, app_store):
        app_store.fail = True

        response = client.get("/health/cache")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["redis"]["stores"]["app"]["status"] == "unhealthy"

    def test_not_initialized(self, client):
        RedisManager._initialized = False

        response = client.get("/health/cache")

        assert response.status_code == 503
        assert response.json()["redis"]["initialized"] is False
