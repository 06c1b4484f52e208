"""
Hostaway REST client.

Issues authenticated calls against the vendor API and classifies every
failure into the gateway's error taxonomy. The client never retries; callers
decide whether a failure is worth another attempt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import httpx

from owner_portal.clients.hostaway_auth import HostawayTokenCache
from owner_portal.core.config import HostawaySettings
from owner_portal.core.errors import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
    RateLimitError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    VendorError,
    VendorNotFoundError,
)

logger = logging.getLogger(__name__)

_UNAVAILABLE_STATUSES = frozenset({500, 502, 503, 504})


@dataclass(frozen=True)
class VendorRequest:
    """Immutable description of one vendor call."""

    method: str
    path: str
    query_params: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Any] = None
    acting_user_id: Optional[str] = None

    def __post_init__(self) -> None:
        params = {str(key): str(value) for key, value in self.query_params.items()}
        object.__setattr__(self, "query_params", MappingProxyType(params))
        object.__setattr__(self, "method", self.method.upper())

    def query_string(self) -> str:
        params = dict(self.query_params)
        if self.acting_user_id is not None:
            params["userId"] = str(self.acting_user_id)
        return urlencode(params)

    def url(self, base_url: str) -> str:
        query = self.query_string()
        return f"{base_url}{self.path}{'?' + query if query else ''}"


def _vendor_message(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    message = payload.get("message")
    if not message and isinstance(payload.get("error"), dict):
        message = payload["error"].get("message")
    return str(message) if message else None


class HostawayClient:
    """Authenticated access to the Hostaway API."""

    def __init__(
        self,
        settings: HostawaySettings,
        token_cache: HostawayTokenCache,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._tokens = token_cache
        self._transport = transport

    async def execute(self, request: VendorRequest) -> Any:
        """Perform ``request`` and return the decoded JSON body."""
        token = await self._tokens.get_token()
        url = request.url(self._settings.api_base)
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        logger.info("Making API request: %s %s", request.method, url)

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.request(
                    request.method, url, json=request.body, headers=headers
                )
        except httpx.TimeoutException as exc:
            logger.error("API request timed out (%s): %s", request.path, exc)
            raise UpstreamTimeoutError(
                f"API request timed out after {self._settings.timeout_seconds:g}s: {request.path}"
            ) from exc
        except httpx.TransportError as exc:
            logger.error("API request error (%s): %s", request.path, exc)
            raise NetworkError() from exc

        if not response.is_success:
            raise self._classify(request, response)

        try:
            return response.json()
        except ValueError as exc:
            raise ProtocolError(
                f"Invalid JSON returned for {request.path}",
                http_status=response.status_code,
            ) from exc

    def _classify(self, request: VendorRequest, response: httpx.Response) -> VendorError:
        status = response.status_code
        vendor_message = _vendor_message(response)
        logger.error(
            "API request error (%s): status %s, body %s",
            request.path,
            status,
            response.text,
        )

        if status == 401:
            self._tokens.invalidate()
            return AuthenticationError(
                "Authentication failed. Please try again.",
                http_status=status,
                vendor_message=vendor_message,
            )
        if status == 404:
            return VendorNotFoundError(
                f"Resource not found: {request.path}",
                http_status=status,
                vendor_message=vendor_message,
            )
        if status == 429:
            return RateLimitError(http_status=status, vendor_message=vendor_message)
        if status in _UNAVAILABLE_STATUSES:
            return UpstreamUnavailableError(
                http_status=status, vendor_message=vendor_message
            )
        return ProtocolError(
            vendor_message or f"API request failed with status {status}",
            http_status=status,
            vendor_message=vendor_message,
        )

    async def get_listings(
        self,
        params: Optional[Mapping[str, str]] = None,
        *,
        acting_user_id: Optional[str] = None,
    ) -> Any:
        return await self.execute(
            VendorRequest(
                "GET", "/listings", params or {}, acting_user_id=acting_user_id
            )
        )

    async def get_listing(self, listing_id: str) -> Any:
        return await self.execute(VendorRequest("GET", f"/listings/{listing_id}"))

    async def get_reservations(self, params: Optional[Mapping[str, str]] = None) -> Any:
        return await self.execute(VendorRequest("GET", "/reservations", params or {}))

    async def get_reservation(self, reservation_id: str) -> Any:
        return await self.execute(VendorRequest("GET", f"/reservations/{reservation_id}"))

    async def get_calendar(self, params: Mapping[str, str]) -> Any:
        return await self.execute(VendorRequest("GET", "/calendar", params))

    async def post_finance_report(self, report: str, body: dict[str, Any]) -> Any:
        return await self.execute(
            VendorRequest("POST", f"/finance/report/{report}", body=body)
        )

    async def get_users(self) -> Any:
        return await self.execute(VendorRequest("GET", "/users"))


__all__ = ["HostawayClient", "VendorRequest"]
