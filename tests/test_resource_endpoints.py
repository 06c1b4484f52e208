try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httpx
import pytest

from hostaway_fakes import FakeHostaway, build_client
from owner_portal.main import app

pytestmark = pytest.mark.anyio("asyncio")

OWNER = {"id": 1, "email": "owner@example.com", "hostaway_id": 555}


@pytest.fixture()
def fake():
    from owner_portal import dependencies

    hostaway = FakeHostaway()
    client = build_client(hostaway)

    app.dependency_overrides.clear()
    app.dependency_overrides.update(
        {
            dependencies.get_hostaway_client: lambda: client,
            dependencies.get_current_user: lambda: OWNER,
        }
    )
    yield hostaway
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(fake):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


async def test_listings_proxy_vendor_and_forward_query(client, fake) -> None:
    fake.respond_json("GET", "/listings", {"status": "success", "result": [{"id": 1}]})

    response = await client.get("/api/listings", params={"limit": "3"})

    assert response.status_code == 200
    assert response.json() == {"status": "success", "result": [{"id": 1}]}
    assert fake.api_requests[0].url.params["limit"] == "3"


async def test_listings_fall_back_to_sample_data(client, fake) -> None:
    fake.fail_everything(503)

    response = await client.get("/api/listings")

    assert response.status_code == 200
    assert len(response.json()["result"]["listings"]) == 4


async def test_unknown_listing_is_404_envelope(client, fake) -> None:
    response = await client.get("/api/listings/999")

    assert response.status_code == 404
    assert response.json()["error"] == {"message": "Listing not found", "code": "NOT_FOUND"}


async def test_reservations_fallback_paginates(client, fake) -> None:
    fake.fail_everything(500)

    response = await client.get(
        "/api/reservations", params={"limit": "5", "offset": "10"}
    )

    assert response.status_code == 200
    meta = response.json()["result"]["meta"]
    assert meta == {"total": 12, "limit": 5, "offset": 10, "hasMore": False}


async def test_calendar_missing_params_is_400_without_vendor_call(client, fake) -> None:
    response = await client.get("/api/calendar", params={"listingId": "101"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["message"] == "Missing required parameters: listingId, startDate, endDate"
    assert error["code"] == "BAD_REQUEST"
    assert error["details"] == {"missing": ["startDate", "endDate"]}
    assert fake.api_requests == []


async def test_calendar_vendor_failure_propagates(client, fake) -> None:
    fake.fail_everything(503)

    response = await client.get(
        "/api/calendar",
        params={"listingId": "101", "startDate": "2024-01-01", "endDate": "2024-01-31"},
    )

    assert response.status_code == 503
    assert response.json()["error"]["message"] == (
        "Hostaway API is currently unavailable. Please try again later."
    )


async def test_rate_limit_without_fallback_is_service_unavailable(client, fake) -> None:
    fake.fail_everything(429)

    response = await client.post("/api/finance/report/listingFinancials", json={})

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "TOO_MANY_REQUESTS"


async def test_consolidated_report_normalizes_body(client, fake) -> None:
    fake.respond_json("POST", "/finance/report/consolidated", {"result": {"rows": [1]}})

    response = await client.post(
        "/api/finance/report/consolidated",
        json={"listingMapIds": 101, "fromDate": "2024-01-01", "dateType": "departureDate"},
    )

    assert response.status_code == 200
    assert response.json() == {"result": {"rows": [1]}}
    assert json.loads(fake.api_requests[0].content) == {
        "statuses": ["confirmed"],
        "listingMapIds": [101],
        "fromDate": "2024-01-01",
        "dateType": "departureDate",
    }


async def test_invalid_report_date_is_400(client, fake) -> None:
    response = await client.post(
        "/api/finance/report/consolidated", json={"toDate": "soon"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid date input: soon"
    assert fake.api_requests == []


async def test_resource_routes_require_authentication(fake) -> None:
    from owner_portal import dependencies

    del app.dependency_overrides[dependencies.get_current_user]
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as anonymous:
        response = await anonymous.get("/api/listings")

    assert response.status_code == 401
    assert fake.api_requests == []


async def test_bodyless_report_sends_only_confirmed_status(client, fake) -> None:
    fake.respond_json("POST", "/finance/report/consolidated", {"result": []})

    response = await client.post("/api/finance/report/consolidated")

    assert response.status_code == 200
    assert json.loads(fake.api_requests[0].content) == {"statuses": ["confirmed"]}


async def test_listings_fall_back_when_vendor_times_out(client, fake) -> None:
    def stall(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fake.default = stall

    response = await client.get("/api/listings")

    assert response.status_code == 200
    assert len(response.json()["result"]["listings"]) == 4


async def test_listings_fall_back_when_token_payload_is_malformed(client, fake) -> None:
    fake.token_payload = {"access_token": "t", "expires_in": "soon"}

    response = await client.get("/api/listings")

    assert response.status_code == 200
    assert len(response.json()["result"]["listings"]) == 4
    assert fake.api_requests == []
