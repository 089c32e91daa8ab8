# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress endpoints.

Every endpoint acts for the kid bound to the request's session cookie.

This module provides endpoints for:
- GET /progress: All progress of the kid
- GET /progress/{lesson_id}: Progress for one lesson
- POST /progress/{lesson_id}: Merge a progress patch
"""

import logging

from fastapi import APIRouter

from kidspark.api.dependencies import CurrentKidSession, ProgressStoreDep, RowId
from kidspark.models.common import OkResponse
from kidspark.models.progress import (
    ProgressDetailResponse,
    ProgressListResponse,
    ProgressRecord,
    ProgressSummary,
    ProgressUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/progress", response_model=ProgressListResponse, summary="List progress")
async def list_progress(
    session: CurrentKidSession,
    store: ProgressStoreDep,
) -> ProgressListResponse:
    """List the kid's progress on every started lesson."""
    rows = await store.list(session.kid_id)
    return ProgressListResponse(data=[ProgressSummary.model_validate(row) for row in rows])


@router.get(
    "/progress/{lesson_id}",
    response_model=ProgressDetailResponse,
    summary="Get lesson progress",
)
async def get_progress(
    lesson_id: RowId,
    session: CurrentKidSession,
    store: ProgressStoreDep,
) -> ProgressDetailResponse:
    """Get the kid's progress on one lesson. data is null if never started."""
    row = await store.get(session.kid_id, lesson_id)
    return ProgressDetailResponse(
        data=ProgressRecord.model_validate(row) if row is not None else None
    )


@router.post(
    "/progress/{lesson_id}",
    response_model=OkResponse,
    summary="Save lesson progress",
    description=(
        "Merge a partial progress patch. Missing status means in_progress and "
        "missing time_spent_seconds means 0; score and answers_json keep their "
        "stored value when absent."
    ),
)
async def save_progress(
    lesson_id: RowId,
    data: ProgressUpdateRequest,
    session: CurrentKidSession,
    store: ProgressStoreDep,
) -> OkResponse:
    """Upsert the kid's progress on one lesson."""
    await store.upsert(session.kid_id, lesson_id, data)
    return OkResponse()
