"""Financial report requests proxied to Hostaway."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from owner_portal.clients.hostaway import HostawayClient
from owner_portal.core.errors import ValidationError

CONSOLIDATED_REPORT = "consolidated"
LISTING_FINANCIALS_REPORT = "listingFinancials"


def normalize_listing_ids(value: Any) -> Optional[List[Any]]:
    """Accept a list, a comma-separated string, or a single id."""
    if value is None or value == "" or value == []:
        return None
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [part.strip() for part in value.split(",")]
    return [value]


def format_report_date(value: Any) -> Optional[str]:
    """Reformat a date or datetime string as ``YYYY-MM-DD``.

    Offset-aware timestamps are converted to UTC first.
    """
    if value is None or value == "":
        return None
    raw = str(value).strip()
    try:
        moment = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid date input: {value}") from exc
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


class FinanceReportService:
    """Build vendor report bodies; reports only ever cover confirmed stays."""

    def __init__(self, client: HostawayClient) -> None:
        self._client = client

    @staticmethod
    def build_body(
        *,
        listing_map_ids: Any = None,
        from_date: Any = None,
        to_date: Any = None,
        date_type: Optional[str] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"statuses": ["confirmed"]}
        ids = normalize_listing_ids(listing_map_ids)
        if ids is not None:
            body["listingMapIds"] = ids
        formatted_from = format_report_date(from_date)
        if formatted_from:
            body["fromDate"] = formatted_from
        formatted_to = format_report_date(to_date)
        if formatted_to:
            body["toDate"] = formatted_to
        if date_type:
            body["dateType"] = date_type
        return body

    async def report(self, report: str, **filters: Any) -> Any:
        body = self.build_body(**filters)
        return await self._client.post_finance_report(report, body)

    async def consolidated(self, **filters: Any) -> Any:
        return await self.report(CONSOLIDATED_REPORT, **filters)

    async def listing_financials(self, **filters: Any) -> Any:
        return await self.report(LISTING_FINANCIALS_REPORT, **filters)


__all__ = [
    "CONSOLIDATED_REPORT",
    "FinanceReportService",
    "LISTING_FINANCIALS_REPORT",
    "format_report_date",
    "normalize_listing_ids",
]
