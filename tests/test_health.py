"""Health check endpoint tests."""

from httpx import AsyncClient


async def test_health_check(async_client: AsyncClient) -> None:
    """Test health check endpoint returns healthy status."""
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_root_endpoint(async_client: AsyncClient) -> None:
    """Test root endpoint returns API info."""
    response = await async_client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Workout Tracker API"
    assert "version" in data
    assert data["docs"] == "/docs"


async def test_api_v1_status(async_client: AsyncClient) -> None:
    """Test API v1 status endpoint."""
    response = await async_client.get("/api/v1/status")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "v1"
