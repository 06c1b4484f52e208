"""
Error taxonomy shared by the vendor clients, the services and the HTTP layer.

Every error carries the HTTP status it surfaces with and a stable ``code`` used
in the JSON error envelope. Vendor-originated failures additionally subclass
``VendorError`` and keep the upstream status and message for logging.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional


class PortalError(Exception):
    """Base class for errors rendered through the JSON error envelope."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_envelope(self, *, include_details: bool = False) -> dict:
        error: dict[str, Any] = {"message": self.message, "code": self.code}
        if include_details and self.details is not None:
            error["details"] = self.details
        return {"error": error}


class ValidationError(PortalError):
    """Malformed or missing input. Never reaches the vendor."""

    status_code = HTTPStatus.BAD_REQUEST
    code = "BAD_REQUEST"
    default_message = "Bad request"


class NotFoundError(PortalError):
    status_code = HTTPStatus.NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class VendorError(PortalError):
    """A classified failure of a single Hostaway call."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        http_status: Optional[int] = None,
        vendor_message: Optional[str] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message, details=details)
        self.http_status = http_status
        self.vendor_message = vendor_message


class AuthenticationError(VendorError):
    """Credential exchange failed or the vendor rejected the bearer token."""

    status_code = HTTPStatus.BAD_GATEWAY
    code = "UPSTREAM_AUTHENTICATION_FAILED"
    default_message = "Failed to authenticate with Hostaway API"


class VendorNotFoundError(VendorError, NotFoundError):
    status_code = HTTPStatus.NOT_FOUND
    code = "NOT_FOUND"


class RateLimitError(VendorError):
    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    code = "TOO_MANY_REQUESTS"
    default_message = "API rate limit exceeded. Please try again later."


class UpstreamUnavailableError(VendorError):
    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    code = "SERVICE_UNAVAILABLE"
    default_message = "Hostaway API is currently unavailable. Please try again later."


class UpstreamTimeoutError(VendorError):
    status_code = HTTPStatus.GATEWAY_TIMEOUT
    code = "TIMEOUT"
    default_message = "Hostaway API request timed out"


class NetworkError(VendorError):
    status_code = HTTPStatus.BAD_GATEWAY
    code = "NETWORK_ERROR"
    default_message = (
        "No response received from API. Please check your network connection."
    )


class ProtocolError(VendorError):
    status_code = HTTPStatus.BAD_GATEWAY
    code = "UPSTREAM_ERROR"
    default_message = "API request failed"


__all__ = [
    "AuthenticationError",
    "NetworkError",
    "NotFoundError",
    "PortalError",
    "ProtocolError",
    "RateLimitError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    "ValidationError",
    "VendorError",
    "VendorNotFoundError",
]
