"""
Bundled sample data used when the Hostaway API cannot be reached.

Records are reshaped into the vendor's response envelopes so callers can
hand them to clients unchanged. Filtering and pagination emulate the vendor's
reservation query semantics closely enough for the portal's screens.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


DEFAULT_DATASET_PATH = Path(__file__).resolve().parents[1] / "data" / "sample_data.json"

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
_SECONDS_PER_DAY = 24 * 60 * 60


def split_address(full_address: Optional[str]) -> tuple[str, str]:
    """Best-effort ``(city, country)`` from a comma-separated address.

    City is the second segment and country the third; either is an empty
    string when the address has fewer segments. This is not an address
    parser: "Street, City, Country" is the only layout it understands.
    """
    segments = (full_address or "").split(",")
    city = segments[1].strip() if len(segments) > 1 else ""
    country = segments[2].strip() if len(segments) > 2 else ""
    return city, country


def parse_moment(value: Any) -> datetime:
    """Parse an ISO date or datetime into a naive UTC datetime."""
    if isinstance(value, datetime):
        moment = value
    else:
        moment = datetime.fromisoformat(str(value).strip())
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def calculate_nights(check_in: Any, check_out: Any) -> int:
    delta = parse_moment(check_out) - parse_moment(check_in)
    return math.ceil(abs(delta.total_seconds()) / _SECONDS_PER_DAY)


def reservation_total(
    *,
    base_price: float,
    nights: int,
    cleaning_fee: float,
    amenities_fee: float,
    extra_fees: float,
) -> float:
    return base_price * nights + cleaning_fee + amenities_fee + extra_fees


def _parse_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def filter_reservations(
    reservations: List[Dict[str, Any]], filters: Mapping[str, Any]
) -> List[Dict[str, Any]]:
    """Apply the vendor-style reservation filters, each one optional."""
    filtered = list(reservations)

    listing_id = filters.get("listingId")
    if listing_id:
        filtered = [r for r in filtered if str(r["listingId"]) == str(listing_id)]

    arrival_start = filters.get("arrivalStartDate")
    if arrival_start:
        start = parse_moment(arrival_start)
        filtered = [r for r in filtered if parse_moment(r["checkInDate"]) >= start]

    departure_end = filters.get("departureEndDate")
    if departure_end:
        end = parse_moment(departure_end)
        filtered = [r for r in filtered if parse_moment(r["checkOutDate"]) <= end]

    arrival_end = filters.get("arrivalEndDate")
    departure_start = filters.get("departureStartDate")
    if arrival_end and departure_start:
        # Stays overlapping the window, i.e. guests in-house at some point.
        window_end = parse_moment(arrival_end)
        window_start = parse_moment(departure_start)
        filtered = [
            r
            for r in filtered
            if parse_moment(r["checkInDate"]) <= window_end
            and parse_moment(r["checkOutDate"]) >= window_start
        ]

    status = filters.get("status")
    if status:
        filtered = [r for r in filtered if r["status"] == status]

    search = filters.get("search")
    if search:
        term = str(search).lower()
        filtered = [r for r in filtered if term in r["guestName"].lower()]

    return filtered


def paginate(items: List[Any], params: Mapping[str, Any]) -> Dict[str, Any]:
    """Slice ``items`` with ``limit``/``offset`` and describe the page."""
    limit = _parse_int(params.get("limit"), DEFAULT_LIMIT)
    if limit <= 0:
        limit = DEFAULT_LIMIT
    offset = max(_parse_int(params.get("offset"), DEFAULT_OFFSET), 0)
    total = len(items)
    return {
        "items": items[offset : offset + limit],
        "meta": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
    }


class SampleDataProvider:
    """Serve listings and reservations from a local dataset."""

    def __init__(
        self,
        dataset: Optional[Mapping[str, Any]] = None,
        *,
        dataset_path: Path = DEFAULT_DATASET_PATH,
    ) -> None:
        self._dataset = dataset
        self._dataset_path = dataset_path

    def _load(self) -> Mapping[str, Any]:
        if self._dataset is None:
            self._dataset = json.loads(self._dataset_path.read_text(encoding="utf-8"))
        return self._dataset

    def _properties(self) -> List[Dict[str, Any]]:
        return list(self._load()["properties"])

    def _raw_reservations(self) -> List[Dict[str, Any]]:
        return list(self._load()["reservations"])

    @staticmethod
    def _shape_reservation(record: Mapping[str, Any]) -> Dict[str, Any]:
        nights = calculate_nights(record["checkIn"], record["checkOut"])
        return {
            "id": record["id"],
            "listingId": record["propertyId"],
            "guestName": record["guestName"],
            "checkInDate": record["checkIn"],
            "checkOutDate": record["checkOut"],
            "basePrice": record["pricePerNight"],
            "cleaningFee": record["cleaningFee"],
            "amenitiesFee": record["amenities"],
            "extraFees": record["extraFees"],
            "totalPrice": reservation_total(
                base_price=record["pricePerNight"],
                nights=nights,
                cleaning_fee=record["cleaningFee"],
                amenities_fee=record["amenities"],
                extra_fees=record["extraFees"],
            ),
            "source": record.get("bookingSource"),
            "status": record["status"],
        }

    def listings(self) -> List[Dict[str, Any]]:
        listings = []
        for prop in self._properties():
            city, country = split_address(prop.get("address"))
            listings.append(
                {
                    "id": prop["id"],
                    "name": prop["name"],
                    "address": {
                        "full": prop.get("address"),
                        "city": city,
                        "country": country,
                    },
                }
            )
        return listings

    def listing_by_id(self, listing_id: Any) -> Optional[Dict[str, Any]]:
        for prop in self._properties():
            if str(prop["id"]) == str(listing_id):
                return dict(prop)
        return None

    def reservations(self, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        filters = filters or {}
        shaped = [self._shape_reservation(r) for r in self._raw_reservations()]
        return paginate(filter_reservations(shaped, filters), filters)

    def reservation_by_id(self, reservation_id: Any) -> Optional[Dict[str, Any]]:
        for record in self._raw_reservations():
            if str(record["id"]) == str(reservation_id):
                return self._shape_reservation(record)
        return None

    def listings_envelope(self) -> Dict[str, Any]:
        return {"result": {"listings": self.listings()}}

    def reservations_envelope(
        self, filters: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        page = self.reservations(filters)
        return {"result": {"reservations": page["items"], "meta": page["meta"]}}


__all__ = [
    "DEFAULT_DATASET_PATH",
    "SampleDataProvider",
    "calculate_nights",
    "filter_reservations",
    "paginate",
    "parse_moment",
    "reservation_total",
    "split_address",
]
