"""Expose constructed client wrappers."""

from .airdna import AirdnaRentalizerClient, IncomeEstimate, IncomeEstimator
from .hostaway import HostawayClient, VendorRequest
from .hostaway_auth import AccessToken, HostawayTokenCache
from .push import FirebasePushNotifier, LoggingPushNotifier, PushNotifier
from .sqlite_store import PortalStore

__all__ = [
    "AccessToken",
    "AirdnaRentalizerClient",
    "FirebasePushNotifier",
    "HostawayClient",
    "HostawayTokenCache",
    "IncomeEstimate",
    "IncomeEstimator",
    "LoggingPushNotifier",
    "PortalStore",
    "PushNotifier",
    "VendorRequest",
]
