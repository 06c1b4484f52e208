try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import threading
import time

import httpx
import jwt
import pytest

from owner_portal.clients import PortalStore
from owner_portal.core.config import get_settings
from owner_portal.main import app
from owner_portal.services.auth import hash_password

pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture()
def store(tmp_path):
    from owner_portal import dependencies

    portal_store = PortalStore(str(tmp_path / "portal.db"))
    app.dependency_overrides.clear()
    app.dependency_overrides[dependencies.get_portal_store] = lambda: portal_store
    yield portal_store
    app.dependency_overrides.clear()


@pytest.fixture()
def owner(store):
    return store.create_mobile_user(
        hostaway_id=555,
        first_name="Dana",
        last_name="Reyes",
        email="dana@example.com",
        password_hash=hash_password("hunter22"),
        user_id="abc-123",
        revenue_sharing=20,
        referral_code="DANA20",
    )


@pytest.fixture()
async def client(store):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


async def _login(client) -> str:
    response = await client.post(
        "/api/auth/login", json={"email": "dana@example.com", "password": "hunter22"}
    )
    assert response.status_code == 200
    return response.json()["token"]


async def test_login_returns_profile_and_verifiable_token(client, owner) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "dana@example.com", "password": "hunter22"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {
        "id": owner["id"],
        "email": "dana@example.com",
        "userId": 555,
        "name": "Dana Reyes",
    }
    claims = jwt.decode(
        body["token"], get_settings().auth.jwt_secret, algorithms=["HS256"]
    )
    assert claims["userId"] == owner["id"]
    assert claims["haUserId"] == 555


async def test_login_checks_password_off_the_event_loop(client, store) -> None:
    from owner_portal import dependencies

    loop_thread = threading.get_ident()
    seen: list[int] = []

    class RecordingAuthService:
        def login(self, email: str, password: str) -> dict:
            seen.append(threading.get_ident())
            return {"token": "t", "user": {"email": email}}

    app.dependency_overrides[dependencies.get_auth_service] = RecordingAuthService

    response = await client.post(
        "/api/auth/login", json={"email": "dana@example.com", "password": "hunter22"}
    )

    assert response.status_code == 200
    assert len(seen) == 1
    assert seen[0] != loop_thread


async def test_login_rejects_wrong_password(client, owner) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "dana@example.com", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json() == {"status": False, "message": "Invalid Credentials"}


async def test_login_requires_both_fields(client, store) -> None:
    response = await client.post("/api/auth/login", json={"email": "dana@example.com"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Email and password are required"


async def test_me_returns_account_details(client, owner) -> None:
    token = await _login(client)

    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "id": owner["id"],
        "email": "dana@example.com",
        "firstName": "Dana",
        "lastName": "Reyes",
        "hostawayId": 555,
        "referralCode": "DANA20",
        "revenueSharing": 20,
        "user_id": "abc-123",
    }


async def test_verify_returns_user_record(client, owner) -> None:
    token = await _login(client)

    response = await client.post(
        "/api/auth/verify", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["user"]["id"] == owner["id"]
    assert body["user"]["hostawayId"] == 555
    assert body["user"]["referralCode"] == "DANA20"
    assert "password" not in body["user"]
    assert "haUserId" not in body["user"]


@pytest.mark.parametrize(
    ("headers", "message"),
    [
        ({}, "Authentication required"),
        ({"Authorization": "Token abc"}, "Authentication required"),
        ({"Authorization": "Bearer not-a-jwt"}, "Invalid token"),
    ],
)
async def test_protected_routes_reject_bad_tokens(client, store, headers, message) -> None:
    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json() == {"error": {"message": message, "status": 401}}


async def test_expired_and_orphaned_tokens_are_rejected(client, store) -> None:
    secret = get_settings().auth.jwt_secret
    expired = jwt.encode(
        {"userId": 1, "exp": int(time.time()) - 10}, secret, algorithm="HS256"
    )
    orphaned = jwt.encode(
        {"userId": 9999, "exp": int(time.time()) + 60}, secret, algorithm="HS256"
    )

    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {expired}"}
    )
    assert response.json()["error"]["message"] == "Token expired"

    response = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {orphaned}"}
    )
    assert response.json()["error"]["message"] == "Invalid user"


async def test_fcm_token_registration_persists(client, owner, store) -> None:
    token = await _login(client)
    headers = {"Authorization": f"Bearer {token}"}

    missing = await client.post("/api/auth/fcm-token", json={}, headers=headers)
    assert missing.status_code == 400
    assert missing.json() == {"message": "Token is required."}

    response = await client.post(
        "/api/auth/fcm-token", json={"token": "device-1"}, headers=headers
    )

    assert response.status_code == 201
    assert response.json() == {"message": "FCM token saved successfully."}
    assert store.list_fcm_tokens([owner["id"]]) == ["device-1"]
