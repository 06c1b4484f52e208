"""Expose dependency helpers for FastAPI routers."""

from .auth import CurrentUser, TokenClaims, get_current_user, get_token_claims
from .clients import (
    get_auth_service,
    get_calendar_service,
    get_finance_report_service,
    get_hostaway_client,
    get_income_estimate_service,
    get_income_estimator,
    get_listing_service,
    get_notification_service,
    get_partnership_service,
    get_portal_store,
    get_push_notifier,
    get_reservation_service,
    get_sample_data_provider,
    get_token_cache,
)
from .config import Settings, get_app_settings

__all__ = [
    "CurrentUser",
    "Settings",
    "TokenClaims",
    "get_app_settings",
    "get_auth_service",
    "get_calendar_service",
    "get_current_user",
    "get_finance_report_service",
    "get_hostaway_client",
    "get_income_estimate_service",
    "get_income_estimator",
    "get_listing_service",
    "get_notification_service",
    "get_partnership_service",
    "get_portal_store",
    "get_push_notifier",
    "get_reservation_service",
    "get_sample_data_provider",
    "get_token_cache",
    "get_token_claims",
]
