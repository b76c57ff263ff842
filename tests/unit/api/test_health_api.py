"""Health and root endpoints."""


async def test_root_endpoints(async_client):
    root = await async_client.get("/")
    assert root.status_code == 200
    assert root.json() == {"message": "NoteVault API"}

    api_root = await async_client.get("/api/")
    assert api_root.json()["endpoints"]["public"] == "/api/public/{share_token}"


async def test_health_is_degraded_without_redis(async_client):
    response = await async_client.get("/api/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["checks"]["database"]["connected"] is True
    assert body["checks"]["redis"]["connected"] is False


async def test_component_health(async_client):
    database = await async_client.get("/api/health/database")
    redis = await async_client.get("/api/health/redis")
    assert database.json()["status"] == "healthy"
    assert redis.json()["status"] == "unhealthy"
