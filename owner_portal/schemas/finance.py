"""Schemas for the finance report proxy."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class FinanceReportRequest(BaseModel):
    """Report filters; every field is optional and forwarded as given."""

    listingMapIds: Any = Field(
        default=None,
        description="Listing id or list of listing ids to restrict the report to.",
    )
    fromDate: Any = Field(default=None, description="Start of the reporting window.")
    toDate: Any = Field(default=None, description="End of the reporting window.")
    dateType: Optional[str] = Field(
        default=None, description="Which reservation date the window applies to."
    )


__all__ = ["FinanceReportRequest"]
