"""Rental income estimates for prospective listings."""

from __future__ import annotations

from typing import Any, Dict, Optional

from owner_portal.clients.airdna import IncomeEstimator
from owner_portal.core.errors import PortalError, ValidationError

_NOT_AVAILABLE = "Data not available"
_NOT_SPECIFIED = "Not specified"


class EstimateUnavailableError(PortalError):
    status_code = 502
    code = "ESTIMATE_UNAVAILABLE"
    default_message = "Failed to retrieve income estimate"


class EstimatorNotConfiguredError(PortalError):
    code = "ESTIMATOR_NOT_CONFIGURED"
    default_message = "Airdna credentials not configured on the server"


def build_full_address(
    address: str,
    *,
    city: Optional[str] = None,
    state: Optional[str] = None,
    zip_code: Optional[str] = None,
) -> str:
    full_address = address
    if city:
        full_address += f", {city}"
    if state:
        full_address += f", {state}"
    if zip_code:
        full_address += f" {zip_code}"
    return full_address


class IncomeEstimateService:
    def __init__(self, estimator: IncomeEstimator, *, configured: bool) -> None:
        self._estimator = estimator
        self._configured = configured

    async def estimate(
        self,
        *,
        address: Optional[str],
        city: Optional[str] = None,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
        bedrooms: Optional[str] = None,
        bathrooms: Optional[str] = None,
        accommodates: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not address:
            raise ValidationError("Missing required parameter: address")
        if not self._configured:
            raise EstimatorNotConfiguredError()

        full_address = build_full_address(
            address, city=city, state=state, zip_code=zip_code
        )
        details = {
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "accommodates": accommodates,
        }
        estimate = await self._estimator.fetch_income_estimate(full_address, details)
        if estimate is None:
            raise EstimateUnavailableError()

        def figure(name: str, placeholder: str = _NOT_AVAILABLE) -> str:
            return estimate.figure(name) or placeholder

        return {
            "address": full_address,
            "annualRevenue": figure("annual_revenue"),
            "averageOccupancy": figure("average_occupancy"),
            "averageDailyRate": figure("average_daily_rate"),
            "confidenceScore": figure("confidence_score", "Not available"),
            "financials": {
                "operatingExpenses": figure("operating_expenses"),
                "netOperatingIncome": figure("net_operating_income"),
                "capRate": figure("cap_rate"),
            },
            "propertyDetails": {
                key: value or _NOT_SPECIFIED for key, value in details.items()
            },
            "note": "Data extracted from Airdna's Rentalizer tool.",
        }


__all__ = [
    "EstimateUnavailableError",
    "EstimatorNotConfiguredError",
    "IncomeEstimateService",
    "build_full_address",
]
