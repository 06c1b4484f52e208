try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from owner_portal.clients import PortalStore
from owner_portal.main import app
from owner_portal.services import ReservationNotificationService
from owner_portal.services.notifications import build_booking_alert, format_currency

pytestmark = pytest.mark.anyio("asyncio")

RESERVATION = {
    "id": 88123,
    "listingMapId": 101,
    "listingName": "Harborview Loft",
    "guestFirstName": "Maya",
    "arrivalDate": "2024-06-01",
    "departureDate": "2024-06-05",
    "totalPrice": 1234.5,
}


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[list[int], dict]] = []

    async def notify(self, user_ids, payload) -> None:
        self.sent.append((list(user_ids), dict(payload)))


class ExplodingNotifier:
    async def notify(self, user_ids, payload) -> None:
        raise RuntimeError("firebase unavailable")


@pytest.fixture()
def store(tmp_path) -> PortalStore:
    portal_store = PortalStore(str(tmp_path / "portal.db"))
    owner = portal_store.create_mobile_user(
        hostaway_id=555,
        first_name="Dana",
        last_name=None,
        email="dana@example.com",
        password_hash="x",
        user_id="u-1",
    )
    portal_store.upsert_hostaway_user(ha_user_id=555, listing_id=101)
    portal_store.save_fcm_token(user_id=owner["id"], token="device-1")
    return portal_store


@pytest.fixture()
def notifier():
    from owner_portal import dependencies

    recorder = RecordingNotifier()
    app.dependency_overrides.clear()
    yield recorder, dependencies
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(notifier):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


def _use(dependencies, store, notifier) -> None:
    app.dependency_overrides[dependencies.get_notification_service] = (
        lambda: ReservationNotificationService(store, notifier)
    )


def test_booking_alert_wording() -> None:
    assert format_currency(1234.5) == "$1,234.50"
    assert build_booking_alert(RESERVATION) == {
        "title": "\U0001F389 New Booking: $1,234.50 Earned!",
        "body": "Maya booked Harborview Loft from 2024-06-01 to 2024-06-05. Tap to view details!",
    }


async def test_webhook_rejects_unknown_source(client, notifier, store) -> None:
    recorder, dependencies = notifier
    _use(dependencies, store, recorder)

    response = await client.post(
        "/api/new-reservation",
        json=RESERVATION,
        headers={"x-internal-source": "someone-else"},
    )

    assert response.status_code == 403
    assert response.json() == {"status": False, "message": "Forbidden"}
    assert recorder.sent == []


async def test_webhook_notifies_listing_owners(client, notifier, store) -> None:
    recorder, dependencies = notifier
    _use(dependencies, store, recorder)

    response = await client.post(
        "/api/new-reservation",
        json=RESERVATION,
        headers={"x-internal-source": "securestay.ai"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Handled new reservation for push notification",
    }
    owner = store.get_mobile_user_by_email("dana@example.com")
    assert recorder.sent == [([owner["id"]], build_booking_alert(RESERVATION))]


@pytest.mark.parametrize("listing_map_id", [999, "abc"])
async def test_webhook_without_owners_sends_nothing(
    client, notifier, store, listing_map_id
) -> None:
    recorder, dependencies = notifier
    _use(dependencies, store, recorder)

    response = await client.post(
        "/api/new-reservation",
        json={**RESERVATION, "listingMapId": listing_map_id},
        headers={"x-internal-source": "securestay.ai"},
    )

    assert response.status_code == 200
    assert recorder.sent == []


async def test_webhook_reports_dispatch_failure(client, notifier, store) -> None:
    _, dependencies = notifier
    _use(dependencies, store, ExplodingNotifier())

    response = await client.post(
        "/api/new-reservation",
        json=RESERVATION,
        headers={"x-internal-source": "securestay.ai"},
    )

    assert response.status_code == 500
    assert response.json() == {
        "status": False,
        "message": "Something went wrong processing reservation 88123",
    }
