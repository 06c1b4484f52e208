"""
FastAPI routes proxying the Hostaway API for the owner portal.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import JSONResponse

from owner_portal.api.auth import router as auth_router
from owner_portal.core.errors import ValidationError
from owner_portal.dependencies import (
    CurrentUser,
    Settings,
    get_calendar_service,
    get_current_user,
    get_finance_report_service,
    get_income_estimate_service,
    get_listing_service,
    get_notification_service,
    get_partnership_service,
    get_reservation_service,
)
from owner_portal.schemas import FinanceReportRequest

router = APIRouter()
router.include_router(auth_router)

protected = APIRouter(dependencies=[Depends(get_current_user)])

logger = logging.getLogger(__name__)


def _report_filters(payload: Optional[FinanceReportRequest]) -> dict:
    payload = payload or FinanceReportRequest()
    return {
        "listing_map_ids": payload.listingMapIds,
        "from_date": payload.fromDate,
        "to_date": payload.toDate,
        "date_type": payload.dateType,
    }


@protected.get("/listings", status_code=HTTPStatus.OK)
async def list_listings(
    request: Request,
    service: Annotated[Any, Depends(get_listing_service)],
) -> Any:
    return await service.list(dict(request.query_params))


@protected.get("/listings/{listing_id}", status_code=HTTPStatus.OK)
async def get_listing(
    listing_id: str,
    service: Annotated[Any, Depends(get_listing_service)],
) -> Any:
    return await service.get(listing_id)


@protected.get("/reservations", status_code=HTTPStatus.OK)
async def list_reservations(
    request: Request,
    service: Annotated[Any, Depends(get_reservation_service)],
) -> Any:
    """Reservations, filtered and paginated by the query string."""
    return await service.list(dict(request.query_params))


@protected.get("/reservations/{reservation_id}", status_code=HTTPStatus.OK)
async def get_reservation(
    reservation_id: str,
    service: Annotated[Any, Depends(get_reservation_service)],
) -> Any:
    return await service.get(reservation_id)


@protected.get("/calendar", status_code=HTTPStatus.OK)
async def get_calendar(
    request: Request,
    service: Annotated[Any, Depends(get_calendar_service)],
) -> Any:
    params = dict(request.query_params)
    return await service.get(
        listing_id=params.pop("listingId", None),
        start_date=params.pop("startDate", None),
        end_date=params.pop("endDate", None),
        extra=params,
    )


@protected.post("/finance/report/consolidated", status_code=HTTPStatus.OK)
async def consolidated_report(
    service: Annotated[Any, Depends(get_finance_report_service)],
    payload: Optional[FinanceReportRequest] = None,
) -> Any:
    return await service.consolidated(**_report_filters(payload))


@protected.post("/finance/report/listingFinancials", status_code=HTTPStatus.OK)
async def listing_financials_report(
    service: Annotated[Any, Depends(get_finance_report_service)],
    payload: Optional[FinanceReportRequest] = None,
) -> Any:
    return await service.listing_financials(**_report_filters(payload))


@protected.get("/income-estimate", status_code=HTTPStatus.OK)
async def income_estimate(
    service: Annotated[Any, Depends(get_income_estimate_service)],
    address: Optional[str] = Query(default=None),
    city: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    zip_code: Optional[str] = Query(default=None, alias="zipCode"),
    bedrooms: Optional[str] = Query(default=None),
    bathrooms: Optional[str] = Query(default=None),
    accommodates: Optional[str] = Query(default=None),
) -> Any:
    """Best-effort Airdna Rentalizer estimate for an address."""
    result = await service.estimate(
        address=address,
        city=city,
        state=state,
        zip_code=zip_code,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        accommodates=accommodates,
    )
    return {"result": result}


@protected.get("/getpartnershipinfo", status_code=HTTPStatus.OK)
async def partnership_info(
    user: CurrentUser,
    service: Annotated[Any, Depends(get_partnership_service)],
) -> Any:
    try:
        data = await service.for_user(user["id"])
    except Exception:
        logger.exception("Partnership lookup failed for user %s", user["id"])
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content={
                "status": False,
                "message": "Something went wrong fetching partnership info",
            },
        )
    return {"success": True, "data": data}


router.include_router(protected)


@router.post("/new-reservation", status_code=HTTPStatus.OK)
async def new_reservation(
    request: Request,
    service: Annotated[Any, Depends(get_notification_service)],
    settings: Settings,
    x_internal_source: Optional[str] = Header(default=None),
) -> Any:
    """Internal webhook: push a booking alert to the listing's owners."""
    if x_internal_source != settings.internal_source_token:
        logger.error("Rejected new reservation from source %r", x_internal_source)
        return JSONResponse(
            status_code=HTTPStatus.FORBIDDEN,
            content={"status": False, "message": "Forbidden"},
        )

    try:
        reservation = await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be a JSON object") from exc
    if not isinstance(reservation, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        await service.handle_new_reservation(reservation)
    except Exception:
        logger.exception("Processing new reservation %s failed", reservation.get("id"))
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content={
                "status": False,
                "message": f"Something went wrong processing reservation {reservation.get('id')}",
            },
        )
    return {"success": True, "message": "Handled new reservation for push notification"}


__all__ = ["router"]
