"""Bearer-token authentication for portal user routes."""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Header, HTTPException

from owner_portal.services.auth import AuthService, InvalidTokenError, TokenExpiredError

from .clients import get_auth_service


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(status_code=HTTPStatus.UNAUTHORIZED, detail=message)


def get_token_claims(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Optional[str] = Header(default=None),
) -> Dict[str, Any]:
    """Decode the ``Authorization: Bearer`` token into its claims."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or not token:
        raise _unauthorized("Authentication required")

    try:
        return auth_service.verify_token(token)
    except TokenExpiredError as exc:
        raise _unauthorized("Token expired") from exc
    except InvalidTokenError as exc:
        raise _unauthorized("Invalid token") from exc


TokenClaims = Annotated[Dict[str, Any], Depends(get_token_claims)]


def get_current_user(
    claims: TokenClaims,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Dict[str, Any]:
    """Load the mobile user named by the token claims."""
    user = auth_service.resolve_user(claims)
    if user is None:
        raise _unauthorized("Invalid user")
    return user


CurrentUser = Annotated[Dict[str, Any], Depends(get_current_user)]

__all__ = ["CurrentUser", "TokenClaims", "get_current_user", "get_token_claims"]
