"""Public schema exports."""

from .auth import FcmTokenRequest, LoginRequest
from .finance import FinanceReportRequest

__all__ = [
    "FcmTokenRequest",
    "FinanceReportRequest",
    "LoginRequest",
]
