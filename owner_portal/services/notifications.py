"""New-reservation alerts for the owners of the booked listing."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from owner_portal.clients.push import PushNotifier
from owner_portal.clients.sqlite_store import PortalStore

logger = logging.getLogger(__name__)


def format_currency(amount: Any, currency_symbol: str = "$") -> str:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return f"{currency_symbol}0.00"
    return f"{currency_symbol}{value:,.2f}"


def build_booking_alert(reservation: Mapping[str, Any]) -> Dict[str, str]:
    guest = reservation.get("guestFirstName") or reservation.get("guestName") or "A guest"
    return {
        "title": f"\U0001F389 New Booking: {format_currency(reservation.get('totalPrice'))} Earned!",
        "body": (
            f"{guest} booked {reservation.get('listingName')} from "
            f"{reservation.get('arrivalDate')} to {reservation.get('departureDate')}. "
            "Tap to view details!"
        ),
    }


class ReservationNotificationService:
    def __init__(self, store: PortalStore, notifier: PushNotifier) -> None:
        self._store = store
        self._notifier = notifier

    async def handle_new_reservation(
        self, reservation: Mapping[str, Any]
    ) -> Optional[Dict[str, str]]:
        """Notify the owners of ``listingMapId``; returns the alert sent, if any."""
        listing_map_id = reservation.get("listingMapId")
        if listing_map_id is None:
            logger.info("Reservation %s has no listingMapId", reservation.get("id"))
            return None

        try:
            listing_id = int(listing_map_id)
        except (TypeError, ValueError):
            logger.warning(
                "Ignoring reservation with invalid listingMapId: %r", listing_map_id
            )
            return None

        hostaway_user_ids = self._store.list_hostaway_user_ids(listing_id)
        if not hostaway_user_ids:
            logger.info("No Hostaway user found for listingMapId: %s", listing_map_id)
            return None

        user_ids = self._store.list_mobile_user_ids_for_hostaway_ids(hostaway_user_ids)
        if not user_ids:
            logger.info(
                "No portal users linked to Hostaway users %s", hostaway_user_ids
            )
            return None

        alert = build_booking_alert(reservation)
        await self._notifier.notify(user_ids, alert)
        return alert


__all__ = [
    "ReservationNotificationService",
    "build_booking_alert",
    "format_currency",
]
