"""
Portal user authentication routes.
"""

from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from owner_portal.dependencies import CurrentUser, get_auth_service
from owner_portal.schemas import FcmTokenRequest, LoginRequest
from owner_portal.services.auth import (
    AuthService,
    InvalidCredentialsError,
    account_details,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", status_code=HTTPStatus.OK)
async def login(
    payload: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Any:
    """Exchange email and password for a bearer token."""
    if not payload.email or not payload.password:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail="Email and password are required",
        )

    try:
        return await asyncio.to_thread(
            auth_service.login, payload.email, payload.password
        )
    except InvalidCredentialsError:
        logger.info("Rejected login for %s", payload.email)
        return JSONResponse(
            status_code=HTTPStatus.UNAUTHORIZED,
            content={"status": False, "message": "Invalid Credentials"},
        )


@router.get("/me", status_code=HTTPStatus.OK)
async def current_user_details(user: CurrentUser) -> dict:
    return account_details(user)


@router.post("/verify", status_code=HTTPStatus.OK)
async def verify_token(user: CurrentUser) -> dict:
    """Reaching this handler means the token checked out."""
    return {"valid": True, "user": account_details(user)}


@router.post("/fcm-token", status_code=HTTPStatus.CREATED)
async def register_fcm_token(
    payload: FcmTokenRequest,
    user: CurrentUser,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Any:
    if not payload.token:
        return JSONResponse(
            status_code=HTTPStatus.BAD_REQUEST,
            content={"message": "Token is required."},
        )

    auth_service.register_device_token(user_id=user["id"], token=payload.token)
    logger.info("Saved FCM token for user %s", user["id"])
    return {"message": "FCM token saved successfully."}


__all__ = ["router"]
