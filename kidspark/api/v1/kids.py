# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kid profile administration.

Requires an administrator session.

This module provides endpoints for:
- GET /: List kids
- POST /: Create a kid
- GET /{kid_id}: Get a kid
- PUT /{kid_id}: Update a kid (absent fields are kept)
- DELETE /{kid_id}: Delete a kid with its sessions and progress
"""

import logging

from fastapi import APIRouter, HTTPException, status

from kidspark.api.dependencies import AdminUser, KidServiceDep, RowId
from kidspark.domains.kid import KidNotFoundError
from kidspark.models.common import OkResponse
from kidspark.models.kid import (
    KidCreateRequest,
    KidDetailResponse,
    KidListResponse,
    KidResponse,
    KidUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


@router.get("", response_model=KidListResponse, summary="List kids")
async def list_kids(_admin: AdminUser, kid_service: KidServiceDep) -> KidListResponse:
    kids = await kid_service.list_kids()
    return KidListResponse(data=[KidResponse.model_validate(kid) for kid in kids])


@router.post(
    "",
    response_model=KidDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create kid",
)
async def create_kid(
    data: KidCreateRequest,
    _admin: AdminUser,
    kid_service: KidServiceDep,
) -> KidDetailResponse:
    kid = await kid_service.create(data)
    return KidDetailResponse(data=KidResponse.model_validate(kid))


@router.get("/{kid_id}", response_model=KidDetailResponse, summary="Get kid")
async def get_kid(
    kid_id: RowId,
    _admin: AdminUser,
    kid_service: KidServiceDep,
) -> KidDetailResponse:
    try:
        kid = await kid_service.get(kid_id)
    except KidNotFoundError:
        raise _not_found()
    return KidDetailResponse(data=KidResponse.model_validate(kid))


@router.put("/{kid_id}", response_model=KidDetailResponse, summary="Update kid")
async def update_kid(
    kid_id: RowId,
    data: KidUpdateRequest,
    _admin: AdminUser,
    kid_service: KidServiceDep,
) -> KidDetailResponse:
    """Apply a partial update; fields sent as null or omitted are kept."""
    try:
        kid = await kid_service.update(kid_id, data)
    except KidNotFoundError:
        raise _not_found()
    return KidDetailResponse(data=KidResponse.model_validate(kid))


@router.delete("/{kid_id}", response_model=OkResponse, summary="Delete kid")
async def delete_kid(
    kid_id: RowId,
    _admin: AdminUser,
    kid_service: KidServiceDep,
) -> OkResponse:
    try:
        await kid_service.delete(kid_id)
    except KidNotFoundError:
        raise _not_found()
    return OkResponse()
