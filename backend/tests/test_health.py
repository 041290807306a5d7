import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_returns_200(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_public_config(client: AsyncClient) -> None:
    response = await client.get("/api/config/public")
    assert response.status_code == 200
    data = response.json()
    assert data["barter_statuses"] == [
        "pending",
        "counter_offered",
        "accepted",
        "rejected",
        "cancelled",
        "completed",
    ]
    assert data["terminal_statuses"] == ["cancelled", "completed", "rejected"]
    assert data["barter_list_max_limit"] >= data["barter_list_default_limit"]
