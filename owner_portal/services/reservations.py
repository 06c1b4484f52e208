"""Reservation lookups served from Hostaway with a sample-data fallback."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from owner_portal.clients.hostaway import HostawayClient
from owner_portal.core.errors import NotFoundError
from owner_portal.services.sample_data import SampleDataProvider
from owner_portal.utils.outcome import attempt, capture, prefer_upstream_error


class ReservationService:
    """Resource handler for reservations.

    Query parameters are forwarded to the vendor untouched. On fallback the
    same parameters drive the local filters and pagination.
    """

    def __init__(self, client: HostawayClient, samples: SampleDataProvider) -> None:
        self._client = client
        self._samples = samples

    async def list(self, params: Optional[Mapping[str, str]] = None) -> Any:
        params = dict(params or {})
        vendor = await attempt(self._client.get_reservations(params))
        return prefer_upstream_error(
            vendor,
            lambda: capture(self._samples.reservations_envelope, params),
            resource="reservations",
        )

    async def get(self, reservation_id: str) -> Any:
        vendor = await attempt(self._client.get_reservation(reservation_id))
        result = prefer_upstream_error(
            vendor,
            lambda: capture(self._single_reservation, reservation_id),
            resource=f"reservation {reservation_id}",
        )
        if result is None:
            raise NotFoundError("Reservation not found")
        return result

    def _single_reservation(self, reservation_id: str) -> Optional[dict]:
        reservation = self._samples.reservation_by_id(reservation_id)
        return {"result": reservation} if reservation is not None else None


__all__ = ["ReservationService"]
