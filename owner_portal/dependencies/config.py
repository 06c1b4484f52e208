"""
Settings dependency for routers.
"""

from typing import Annotated

from fastapi import Depends

from owner_portal.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """Return the process-wide settings; override in tests to change them."""
    return get_settings()


Settings = Annotated[AppSettings, Depends(get_app_settings)]

__all__ = ["Settings", "get_app_settings"]
