"""
Portal user authentication.

Mobile users sign in with email and password (bcrypt hashes in the local
store) and receive an HS256 bearer token carrying their portal and Hostaway
identities.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import bcrypt
import jwt

from owner_portal.clients.sqlite_store import PortalStore
from owner_portal.core.config import AuthSettings


class InvalidCredentialsError(Exception):
    """Raised when the email is unknown or the password does not match."""


class TokenExpiredError(Exception):
    """Raised when a bearer token is past its expiry."""


class InvalidTokenError(Exception):
    """Raised when a bearer token fails signature or claim checks."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def full_name(user: Dict[str, Any]) -> str:
    return " ".join(part for part in (user.get("first_name"), user.get("last_name")) if part)


def public_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Login response shape: no password, names merged, Hostaway id as userId."""
    return {
        "id": user["id"],
        "email": user["email"],
        "userId": user["hostaway_id"],
        "name": full_name(user),
    }


def account_details(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user["id"],
        "email": user["email"],
        "firstName": user.get("first_name"),
        "lastName": user.get("last_name"),
        "hostawayId": user["hostaway_id"],
        "referralCode": user.get("referral_code"),
        "revenueSharing": user.get("revenue_sharing"),
        "user_id": user.get("user_id"),
    }


class AuthService:
    """Verify credentials and issue or check bearer tokens."""

    def __init__(self, store: PortalStore, settings: AuthSettings) -> None:
        self._store = store
        self._settings = settings

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self._store.get_mobile_user_by_email(email)
        if user is None or not verify_password(password, user["password"]):
            raise InvalidCredentialsError(email)
        return {"user": public_profile(user), "token": self.issue_token(user)}

    def issue_token(self, user: Dict[str, Any]) -> str:
        issued_at = int(time.time())
        claims = {
            "userId": user["id"],
            "email": user["email"],
            "name": full_name(user),
            "haUserId": user["hostaway_id"],
            "iat": issued_at,
            "exp": issued_at + self._settings.jwt_expiry_seconds,
        }
        return jwt.encode(
            claims, self._settings.jwt_secret, algorithm=self._settings.jwt_algorithm
        )

    def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._settings.jwt_secret,
                algorithms=[self._settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

    def resolve_user(self, claims: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        user_id = claims.get("userId")
        if user_id is None:
            return None
        return self._store.get_mobile_user(int(user_id))

    def register_device_token(self, *, user_id: int, token: str) -> Dict[str, Any]:
        return self._store.save_fcm_token(user_id=user_id, token=token)


__all__ = [
    "AuthService",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "account_details",
    "hash_password",
    "public_profile",
    "verify_password",
]
