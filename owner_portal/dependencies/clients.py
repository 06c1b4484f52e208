"""
Factory functions to provide shared clients and services as FastAPI dependencies.

Clients are process-wide singletons; in particular the Hostaway token cache
must be shared so every request reuses the same access token. Services are
cheap wrappers rebuilt per request from their (overridable) collaborators.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from owner_portal.clients import (
    AirdnaRentalizerClient,
    FirebasePushNotifier,
    HostawayClient,
    HostawayTokenCache,
    LoggingPushNotifier,
    PortalStore,
    PushNotifier,
)
from owner_portal.core.config import get_settings
from owner_portal.services import (
    AuthService,
    CalendarService,
    FinanceReportService,
    IncomeEstimateService,
    ListingService,
    PartnershipService,
    ReservationNotificationService,
    ReservationService,
    SampleDataProvider,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_cache() -> HostawayTokenCache:
    """Provide the process-wide Hostaway token cache."""
    return HostawayTokenCache(_settings().hostaway)


@lru_cache()
def get_hostaway_client() -> HostawayClient:
    """Provide the Hostaway API client."""
    return HostawayClient(_settings().hostaway, get_token_cache())


@lru_cache()
def get_sample_data_provider() -> SampleDataProvider:
    """Provide the bundled sample dataset used as a fallback."""
    return SampleDataProvider()


@lru_cache()
def get_portal_store() -> PortalStore:
    """Provide the shared SQLite store."""
    return PortalStore(_settings().database.path)


@lru_cache()
def get_push_notifier() -> PushNotifier:
    """Provide FCM delivery when configured, otherwise a logging stand-in."""
    settings = _settings()
    if not settings.firebase.credentials_path:
        return LoggingPushNotifier()
    return FirebasePushNotifier(
        get_portal_store(), credentials_path=settings.firebase.credentials_path
    )


@lru_cache()
def get_income_estimator() -> AirdnaRentalizerClient:
    """Provide the Airdna Rentalizer scraper."""
    return AirdnaRentalizerClient(_settings().airdna)


HostawayDependency = Annotated[HostawayClient, Depends(get_hostaway_client)]
StoreDependency = Annotated[PortalStore, Depends(get_portal_store)]


def get_listing_service(
    client: HostawayDependency,
    samples: Annotated[SampleDataProvider, Depends(get_sample_data_provider)],
) -> ListingService:
    return ListingService(client, samples)


def get_reservation_service(
    client: HostawayDependency,
    samples: Annotated[SampleDataProvider, Depends(get_sample_data_provider)],
) -> ReservationService:
    return ReservationService(client, samples)


def get_calendar_service(client: HostawayDependency) -> CalendarService:
    return CalendarService(client)


def get_finance_report_service(client: HostawayDependency) -> FinanceReportService:
    return FinanceReportService(client)


def get_partnership_service(
    client: HostawayDependency, store: StoreDependency
) -> PartnershipService:
    return PartnershipService(client, store)


def get_auth_service(store: StoreDependency) -> AuthService:
    return AuthService(store, _settings().auth)


def get_notification_service(
    store: StoreDependency,
    notifier: Annotated[PushNotifier, Depends(get_push_notifier)],
) -> ReservationNotificationService:
    return ReservationNotificationService(store, notifier)


def get_income_estimate_service(
    estimator: Annotated[AirdnaRentalizerClient, Depends(get_income_estimator)],
) -> IncomeEstimateService:
    return IncomeEstimateService(estimator, configured=_settings().airdna.configured)


__all__ = [
    "get_auth_service",
    "get_calendar_service",
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
]
