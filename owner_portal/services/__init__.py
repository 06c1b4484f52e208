"""Service layer exports."""

from .auth import AuthService
from .availability import CalendarService
from .finance import FinanceReportService
from .income_estimate import IncomeEstimateService
from .listings import ListingService
from .notifications import ReservationNotificationService
from .partnership import PartnershipService
from .reservations import ReservationService
from .sample_data import SampleDataProvider

__all__ = [
    "AuthService",
    "CalendarService",
    "FinanceReportService",
    "IncomeEstimateService",
    "ListingService",
    "PartnershipService",
    "ReservationNotificationService",
    "ReservationService",
    "SampleDataProvider",
]
