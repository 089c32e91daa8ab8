# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Administrator authentication endpoints.

This module provides endpoints for:
- POST /login: Check the administrator password and open a session
- POST /logout: Revoke the administrator session
- GET /check: Report whether the administrator session is live
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status

from kidspark.api.cookies import clear_session_cookie, set_session_cookie
from kidspark.api.dependencies import AppSettings, AuthServiceDep
from kidspark.domains.auth import InvalidCredentialsError
from kidspark.models.auth import AdminCheckResponse, AdminLoginRequest
from kidspark.models.common import OkResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=OkResponse,
    summary="Administrator login",
    description="Verify the administrator password and set the ks_admin cookie.",
)
async def login(
    data: AdminLoginRequest,
    response: Response,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> OkResponse:
    """Open an administrator session.

    Raises:
        HTTPException: 401 if the password is wrong or missing.
    """
    try:
        token = await auth_service.login_admin(data.password or "")
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    set_session_cookie(
        response,
        settings.session.admin_cookie,
        token,
        settings.session.admin_ttl_seconds,
        settings.session,
    )
    return OkResponse()


@router.post("/logout", response_model=OkResponse, summary="Administrator logout")
async def logout(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> OkResponse:
    """Revoke the administrator session and clear its cookie."""
    await auth_service.logout_admin(request.cookies.get(settings.session.admin_cookie))
    clear_session_cookie(response, settings.session.admin_cookie, settings.session)
    return OkResponse()


@router.get("/check", response_model=AdminCheckResponse, summary="Administrator session check")
async def check(
    request: Request,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> AdminCheckResponse:
    """Report whether the request carries a live administrator session."""
    authenticated = await auth_service.is_admin(request.cookies.get(settings.session.admin_cookie))
    return AdminCheckResponse(authenticated=authenticated)
