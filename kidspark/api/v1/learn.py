# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Public learner endpoints."""

from fastapi import APIRouter

from kidspark.api.dependencies import KidServiceDep
from kidspark.models.kid import KidSummary, KidSummaryListResponse

router = APIRouter()


@router.get(
    "/kids",
    response_model=KidSummaryListResponse,
    summary="Kid picker",
    description="List kids so the password gate can offer a selector before login.",
)
async def list_kids(kid_service: KidServiceDep) -> KidSummaryListResponse:
    kids = await kid_service.list_kids()
    return KidSummaryListResponse(data=[KidSummary.model_validate(kid) for kid in kids])
