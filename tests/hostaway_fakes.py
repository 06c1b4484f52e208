"""In-process stand-in for the Hostaway API used across the suite."""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx

from owner_portal.clients import HostawayClient, HostawayTokenCache
from owner_portal.core.config import HostawaySettings

API_BASE = "https://hostaway.test/v1"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeHostaway:
    """Answers token exchanges and routes API calls to per-path responders."""

    def __init__(self, *, expires_in: int = 3600) -> None:
        self.expires_in = expires_in
        self.token_requests: list[httpx.Request] = []
        self.api_requests: list[httpx.Request] = []
        self.responders: dict[tuple[str, str], Responder] = {}
        self.default: Optional[Responder] = None
        self.token_payload: Optional[Any] = None

    def respond(self, method: str, path: str, responder: Responder) -> None:
        self.responders[(method.upper(), path)] = responder

    def respond_json(self, method: str, path: str, payload: Any, status: int = 200) -> None:
        self.respond(method, path, lambda request: httpx.Response(status, json=payload))

    def fail_everything(self, status: int) -> None:
        self.default = lambda request: httpx.Response(status, json={"message": "down"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/v1")
        if path == "/accessTokens":
            self.token_requests.append(request)
            if self.token_payload is not None:
                return httpx.Response(200, json=self.token_payload)
            return httpx.Response(
                200,
                json={
                    "access_token": f"token-{len(self.token_requests)}",
                    "expires_in": self.expires_in,
                },
            )

        self.api_requests.append(request)
        responder = self.responders.get((request.method, path), self.default)
        if responder is None:
            return httpx.Response(404, json={"message": f"No route for {path}"})
        return responder(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def hostaway_settings(**overrides: Any) -> HostawaySettings:
    values = {
        "HOSTAWAY_CLIENT_ID": "client-id",
        "HOSTAWAY_CLIENT_SECRET": "client-secret",
        "HOSTAWAY_BASE_URL": API_BASE,
    }
    values.update(overrides)
    return HostawaySettings(**values)


def build_client(fake: FakeHostaway, **settings_overrides: Any) -> HostawayClient:
    settings = hostaway_settings(**settings_overrides)
    transport = fake.transport()
    tokens = HostawayTokenCache(settings, transport=transport)
    return HostawayClient(settings, tokens, transport=transport)
