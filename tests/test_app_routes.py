try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from owner_portal.main import app

pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture()
async def client():
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


async def test_health_reports_status(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["environment"] == "test"
    assert body["uptime"] >= 0
    assert "timestamp" in body


async def test_unknown_api_route_returns_json_404(client) -> None:
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {
        "error": {"message": "API endpoint not found: /api/does-not-exist", "status": 404}
    }


async def test_unknown_api_route_with_other_method_returns_json_404(client) -> None:
    response = await client.delete("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == (
        "API endpoint not found: /api/does-not-exist"
    )


async def test_frontend_routes_render_placeholder_without_build(client) -> None:
    response = await client.get("/dashboard/settings")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Owner Portal" in response.text
