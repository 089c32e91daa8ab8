# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Family access password administration.

Requires an administrator session. Hashes and salts are never returned.

This module provides endpoints for:
- GET /: List passwords
- POST /: Add a password to the pool
- DELETE /{credential_id}: Remove a password
"""

import logging

from fastapi import APIRouter, HTTPException, status

from kidspark.api.dependencies import AdminUser, CredentialStoreDep, RowId
from kidspark.models.common import OkResponse
from kidspark.models.credential import (
    CredentialCreateRequest,
    CredentialDetailResponse,
    CredentialListResponse,
    CredentialSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CredentialListResponse, summary="List access passwords")
async def list_passwords(
    _admin: AdminUser,
    store: CredentialStoreDep,
) -> CredentialListResponse:
    credentials = await store.list_credentials()
    return CredentialListResponse(
        data=[CredentialSummary.model_validate(c) for c in credentials]
    )


@router.post(
    "",
    response_model=CredentialDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add access password",
)
async def create_password(
    data: CredentialCreateRequest,
    _admin: AdminUser,
    store: CredentialStoreDep,
) -> CredentialDetailResponse:
    """Hash and store a new family password."""
    credential = await store.create(data.label, data.password)
    return CredentialDetailResponse(data=CredentialSummary.model_validate(credential))


@router.delete("/{credential_id}", response_model=OkResponse, summary="Remove access password")
async def delete_password(
    credential_id: RowId,
    _admin: AdminUser,
    store: CredentialStoreDep,
) -> OkResponse:
    """Delete a password. Sessions it opened stay valid until they expire.

    Raises:
        HTTPException: 404 if the password does not exist.
    """
    if not await store.delete(credential_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return OkResponse()
