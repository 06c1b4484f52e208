try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httpx
import pytest

from hostaway_fakes import API_BASE, FakeHostaway, build_client
from owner_portal.clients import VendorRequest
from owner_portal.core.errors import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
    RateLimitError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    VendorNotFoundError,
)

pytestmark = pytest.mark.anyio("asyncio")


def test_vendor_request_url_includes_acting_user() -> None:
    request = VendorRequest("get", "/listings", {"limit": 5}, acting_user_id="77")

    assert request.method == "GET"
    assert request.url(API_BASE) == f"{API_BASE}/listings?limit=5&userId=77"
    assert VendorRequest("GET", "/users").url(API_BASE) == f"{API_BASE}/users"


async def test_execute_sends_bearer_token_and_returns_json() -> None:
    fake = FakeHostaway()
    fake.respond_json("GET", "/listings", {"status": "success", "result": []})
    client = build_client(fake)

    payload = await client.get_listings({"limit": "2"}, acting_user_id="42")

    assert payload == {"status": "success", "result": []}
    sent = fake.api_requests[0]
    assert sent.headers["authorization"] == "Bearer token-1"
    assert sent.headers["accept"] == "application/json"
    assert sent.url.params["userId"] == "42"
    assert sent.url.params["limit"] == "2"


async def test_token_is_shared_across_calls() -> None:
    fake = FakeHostaway()
    fake.respond_json("GET", "/listings", {"result": []})
    client = build_client(fake)

    await client.get_listings()
    await client.get_listings()

    assert len(fake.token_requests) == 1
    assert len(fake.api_requests) == 2


async def test_finance_report_posts_json_body() -> None:
    fake = FakeHostaway()
    fake.respond_json("POST", "/finance/report/consolidated", {"result": {"rows": []}})
    client = build_client(fake)

    await client.post_finance_report("consolidated", {"statuses": ["confirmed"]})

    assert json.loads(fake.api_requests[0].content) == {"statuses": ["confirmed"]}


@pytest.mark.parametrize(
    ("status", "error_type", "surfaced_status"),
    [
        (404, VendorNotFoundError, 404),
        (429, RateLimitError, 503),
        (500, UpstreamUnavailableError, 503),
        (503, UpstreamUnavailableError, 503),
        (504, UpstreamUnavailableError, 503),
        (418, ProtocolError, 502),
    ],
)
async def test_error_statuses_are_classified(status, error_type, surfaced_status) -> None:
    fake = FakeHostaway()
    fake.fail_everything(status)
    client = build_client(fake)

    with pytest.raises(error_type) as excinfo:
        await client.get_listing("101")

    assert excinfo.value.status_code == surfaced_status
    assert excinfo.value.http_status == status


async def test_not_found_names_the_endpoint() -> None:
    fake = FakeHostaway()
    client = build_client(fake)

    with pytest.raises(VendorNotFoundError) as excinfo:
        await client.get_reservation("9999")

    assert excinfo.value.message == "Resource not found: /reservations/9999"


async def test_unmapped_status_carries_vendor_message() -> None:
    fake = FakeHostaway()
    fake.respond_json("GET", "/calendar", {"message": "Invalid listing"}, status=422)
    client = build_client(fake)

    with pytest.raises(ProtocolError) as excinfo:
        await client.get_calendar({"listingId": "1"})

    assert excinfo.value.message == "Invalid listing"
    assert excinfo.value.vendor_message == "Invalid listing"


async def test_unauthorized_invalidates_cached_token() -> None:
    fake = FakeHostaway()
    fake.fail_everything(401)
    client = build_client(fake)

    with pytest.raises(AuthenticationError) as excinfo:
        await client.get_listings()
    assert excinfo.value.message == "Authentication failed. Please try again."

    fake.default = None
    fake.respond_json("GET", "/listings", {"result": []})
    await client.get_listings()

    assert len(fake.token_requests) == 2
    assert fake.api_requests[-1].headers["authorization"] == "Bearer token-2"


async def test_timeout_is_distinct_from_network_failure() -> None:
    def timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    def refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fake = FakeHostaway()
    client = build_client(fake)

    fake.respond("GET", "/listings", timeout)
    with pytest.raises(UpstreamTimeoutError) as timeout_info:
        await client.get_listings()
    assert timeout_info.value.status_code == 504

    fake.respond("GET", "/listings", refused)
    with pytest.raises(NetworkError) as network_info:
        await client.get_listings()
    assert network_info.value.status_code == 502


async def test_invalid_json_is_protocol_error() -> None:
    fake = FakeHostaway()
    fake.respond("GET", "/users", lambda request: httpx.Response(200, text="<html>"))
    client = build_client(fake)

    with pytest.raises(ProtocolError):
        await client.get_users()
