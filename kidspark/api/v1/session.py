# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kid session endpoints.

This module provides endpoints for:
- POST /verify: Match a family password, pick a kid, open a session
- GET /check: Report the session and the kid behind it
- POST /logout: Revoke the kid session
"""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status

from kidspark.api.cookies import clear_session_cookie, set_session_cookie
from kidspark.api.dependencies import AppSettings, AuthServiceDep
from kidspark.domains.auth import InvalidCredentialsError
from kidspark.domains.kid import KidNotFoundError
from kidspark.models.auth import KidCheckResponse, KidVerifyRequest
from kidspark.models.common import OkResponse
from kidspark.models.kid import KidSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/verify",
    response_model=OkResponse,
    summary="Unlock the learner app",
    description="Match the password against the family pool and bind a session to the kid.",
)
async def verify(
    data: KidVerifyRequest,
    response: Response,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> OkResponse:
    """Open a kid session.

    Raises:
        HTTPException: 400 if fields are missing, 401 if no credential
            matches, 404 if the kid does not exist.
    """
    missing = data.missing_fields()
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "password and kid_id required", "missing": missing},
        )

    try:
        token = await auth_service.verify_kid(data.password, data.kid_id)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except KidNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Kid not found")

    set_session_cookie(
        response,
        settings.session.kid_cookie,
        token,
        settings.session.kid_ttl_seconds,
        settings.session,
    )
    return OkResponse()


@router.post("/logout", response_model=OkResponse, summary="Kid logout")
async def logout(
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> OkResponse:
    """Revoke the kid session and clear its cookie."""
    await auth_service.logout_kid(request.cookies.get(settings.session.kid_cookie))
    clear_session_cookie(response, settings.session.kid_cookie, settings.session)
    return OkResponse()


@router.get("/check", response_model=KidCheckResponse, summary="Kid session check")
async def check(
    request: Request,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> KidCheckResponse:
    """Report the live kid session, if any, and its kid."""
    kid = await auth_service.current_kid(request.cookies.get(settings.session.kid_cookie))
    if kid is None:
        return KidCheckResponse(authenticated=False)
    return KidCheckResponse(authenticated=True, kid=KidSummary.model_validate(kid))
