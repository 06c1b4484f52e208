"""Partnership and referral rollups for a portal user's listings."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from owner_portal.clients.hostaway import HostawayClient
from owner_portal.clients.sqlite_store import PortalStore

logger = logging.getLogger(__name__)


def _listing_ids(payload: Any) -> List[Any]:
    result = payload.get("result") if isinstance(payload, dict) else None
    if isinstance(result, dict):
        result = result.get("listings")
    if not isinstance(result, list):
        return []
    return [listing["id"] for listing in result if isinstance(listing, dict) and "id" in listing]


def _present(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "listingId": row["listing_id"],
        "totalEarned": row["total_earned"],
        "pendingCommission": row["pending_commission"],
        "activeReferral": row["active_referral"],
        "yearlyProjection": row["yearly_projection"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
        "createdBy": row["created_by"],
        "updatedBy": row["updated_by"],
    }


class PartnershipService:
    def __init__(self, client: HostawayClient, store: PortalStore) -> None:
        self._client = client
        self._store = store

    async def for_user(self, user_id: int) -> Optional[List[Dict[str, Any]]]:
        """Return partnership rows for the listings the user owns on Hostaway."""
        mobile_user = self._store.get_mobile_user(user_id)
        if mobile_user is None:
            logger.info("Mobile user not found with userId: %s", user_id)
            return None

        hostaway_id = str(mobile_user["hostaway_id"])
        listings = await self._client.get_listings(acting_user_id=hostaway_id)
        listing_ids = _listing_ids(listings)
        if not listing_ids:
            logger.info("No listings fetched from Hostaway for userId: %s", hostaway_id)
            return []

        return [_present(row) for row in self._store.list_partnership_info(listing_ids)]


__all__ = ["PartnershipService"]
