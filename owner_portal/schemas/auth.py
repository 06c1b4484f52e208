"""Schemas for portal user authentication."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials posted by the mobile app."""

    email: Optional[str] = Field(default=None, description="Portal account email.")
    password: Optional[str] = Field(default=None, description="Plaintext password.")


class FcmTokenRequest(BaseModel):
    """Device registration token for push notifications."""

    token: Optional[str] = Field(default=None, description="Firebase Cloud Messaging token.")


__all__ = ["FcmTokenRequest", "LoginRequest"]
