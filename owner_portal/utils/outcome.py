"""Two-tier outcome helpers for vendor calls with a local fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from owner_portal.core.errors import PortalError

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the error that prevented producing one."""

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def attempt(operation: Awaitable[T]) -> Outcome[T]:
    """Await a vendor operation, capturing classified gateway errors."""
    try:
        return Outcome(value=await operation)
    except PortalError as exc:
        return Outcome(error=exc)


def capture(func: Callable[..., T], *args: Any, **kwargs: Any) -> Outcome[T]:
    """Run a local fallback, capturing any failure it raises."""
    try:
        return Outcome(value=func(*args, **kwargs))
    except Exception as exc:  # noqa: BLE001 - fallback failures yield to the vendor error
        return Outcome(error=exc)


def prefer_upstream_error(
    vendor: Outcome[T],
    fallback: Callable[[], Outcome[T]],
    *,
    resource: str,
) -> T:
    """Resolve a vendor outcome, consulting ``fallback`` only on failure.

    A successful fallback masks the vendor error. When the fallback fails too,
    the vendor error is raised and the fallback error is only logged.
    """
    if vendor.ok:
        return vendor.value  # type: ignore[return-value]

    logger.warning("Falling back to sample data for %s: %s", resource, vendor.error)
    local = fallback()
    if local.ok:
        return local.value  # type: ignore[return-value]

    logger.error("Sample data fallback for %s failed: %r", resource, local.error)
    return vendor.unwrap()


__all__ = ["Outcome", "attempt", "capture", "prefer_upstream_error"]
