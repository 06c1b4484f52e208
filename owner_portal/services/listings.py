"""Listing lookups served from Hostaway with a sample-data fallback."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from owner_portal.clients.hostaway import HostawayClient
from owner_portal.core.errors import NotFoundError
from owner_portal.services.sample_data import SampleDataProvider
from owner_portal.utils.outcome import attempt, capture, prefer_upstream_error


class ListingService:
    """Resource handler for listings."""

    def __init__(self, client: HostawayClient, samples: SampleDataProvider) -> None:
        self._client = client
        self._samples = samples

    async def list(
        self,
        params: Optional[Mapping[str, str]] = None,
        *,
        acting_user_id: Optional[str] = None,
    ) -> Any:
        vendor = await attempt(
            self._client.get_listings(params, acting_user_id=acting_user_id)
        )
        return prefer_upstream_error(
            vendor,
            lambda: capture(self._samples.listings_envelope),
            resource="listings",
        )

    async def get(self, listing_id: str) -> Any:
        vendor = await attempt(self._client.get_listing(listing_id))
        result = prefer_upstream_error(
            vendor,
            lambda: capture(self._single_listing, listing_id),
            resource=f"listing {listing_id}",
        )
        if result is None:
            raise NotFoundError("Listing not found")
        return result

    def _single_listing(self, listing_id: str) -> Optional[dict]:
        listing = self._samples.listing_by_id(listing_id)
        return {"result": listing} if listing is not None else None


__all__ = ["ListingService"]
