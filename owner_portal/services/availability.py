"""Calendar availability proxied from Hostaway. There is no local fallback."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from owner_portal.clients.hostaway import HostawayClient
from owner_portal.core.errors import ValidationError

REQUIRED_PARAMS = ("listingId", "startDate", "endDate")


class CalendarService:
    def __init__(self, client: HostawayClient) -> None:
        self._client = client

    async def get(
        self,
        *,
        listing_id: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
        extra: Optional[Mapping[str, str]] = None,
    ) -> Any:
        params = dict(extra or {})
        params.update(
            {"listingId": listing_id, "startDate": start_date, "endDate": end_date}
        )
        if not all(params[name] for name in REQUIRED_PARAMS):
            raise ValidationError(
                f"Missing required parameters: {', '.join(REQUIRED_PARAMS)}",
                details={"missing": [name for name in REQUIRED_PARAMS if not params[name]]},
            )
        return await self._client.get_calendar(params)


__all__ = ["CalendarService", "REQUIRED_PARAMS"]
