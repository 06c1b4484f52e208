"""
Hostaway access token cache.

Holds the single client-credentials token used for every vendor call and
refreshes it ahead of expiry.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx

from owner_portal.core.config import HostawaySettings
from owner_portal.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AccessToken:
    """A cached vendor token and the moment it stops being reused."""

    value: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class HostawayTokenCache:
    """Cache a Hostaway access token and refresh it via client credentials.

    States: empty -> cached (after a refresh) -> empty (after ``invalidate``
    or once ``expires_at`` passes). Refreshes are serialized so concurrent
    callers that observe a stale token share a single exchange.
    """

    TOKEN_PATH = "/accessTokens"

    def __init__(
        self,
        settings: HostawaySettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._clock = clock
        self._safety_margin = timedelta(seconds=settings.token_safety_margin_seconds)
        self._token: Optional[AccessToken] = None
        self._refresh_lock = asyncio.Lock()

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def _cached_value(self) -> Optional[str]:
        token = self._token
        if token is not None and token.is_valid(self._clock()):
            return token.value
        return None

    async def get_token(self) -> str:
        """Return a usable token, exchanging credentials when none is cached."""
        cached = self._cached_value()
        if cached is not None:
            return cached

        async with self._refresh_lock:
            # Another waiter may have refreshed while we were queued.
            cached = self._cached_value()
            if cached is not None:
                return cached
            self._token = await self._exchange()
            return self._token.value

    def invalidate(self) -> None:
        """Drop the cached token so the next ``get_token`` refreshes."""
        if self._token is not None:
            logger.info("Invalidating cached Hostaway access token")
        self._token = None

    async def _exchange(self) -> AccessToken:
        payload = {
            "grant_type": "client_credentials",
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "scope": self._settings.scope,
        }
        url = f"{self._settings.api_base}{self.TOKEN_PATH}"
        logger.info("Attempting to authenticate with Hostaway API...")

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    data=payload,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as exc:
            logger.error("Hostaway authentication request failed: %s", exc)
            raise AuthenticationError() from exc

        if not response.is_success:
            logger.error(
                "Hostaway authentication rejected (status %s): %s",
                response.status_code,
                response.text,
            )
            raise AuthenticationError(http_status=response.status_code)

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise AuthenticationError(http_status=response.status_code) from exc

        if not isinstance(token_payload, dict):
            raise AuthenticationError("Incomplete token payload returned from Hostaway.")
        access_token = token_payload.get("access_token")
        try:
            expires_in = int(token_payload.get("expires_in"))
        except (TypeError, ValueError) as exc:
            raise AuthenticationError(
                "Incomplete token payload returned from Hostaway."
            ) from exc
        if not access_token:
            raise AuthenticationError("Incomplete token payload returned from Hostaway.")

        issued_at = self._clock()
        expires_at = issued_at + timedelta(seconds=expires_in) - self._safety_margin
        logger.info("Authentication successful")
        return AccessToken(value=access_token, expires_at=expires_at)


__all__ = ["AccessToken", "HostawayTokenCache"]
