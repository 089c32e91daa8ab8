# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress schemas."""

import json
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from kidspark.models.common import DB_INT_MAX, DB_INT_MIN, UTCDateTime

ProgressStatusValue = Literal["in_progress", "completed"]


class ProgressUpdateRequest(BaseModel):
    """Partial progress patch sent by the learner app.

    Every field is optional. answers_json is an opaque blob; structured
    values are serialized to a JSON string before storage.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: ProgressStatusValue | None = None
    score: int | None = Field(default=None, ge=DB_INT_MIN, le=DB_INT_MAX)
    time_spent_seconds: int | None = Field(default=None, ge=0, le=DB_INT_MAX)
    answers_json: str | None = Field(
        default=None,
        validation_alias=AliasChoices("answers_json", "answers_blob"),
    )

    @field_validator("answers_json", mode="before")
    @classmethod
    def serialize_answers(cls, value: Any) -> Any:
        """Accept structured answers and store them as a JSON string."""
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value


class ProgressRecord(BaseModel):
    """Stored progress for one lesson."""

    model_config = ConfigDict(from_attributes=True)

    lesson_id: int
    status: ProgressStatusValue
    score: int | None = None
    time_spent_seconds: int
    answers_json: str | None = None
    started_at: UTCDateTime
    completed_at: UTCDateTime | None = None


class ProgressSummary(BaseModel):
    """Progress listing entry (answers omitted)."""

    model_config = ConfigDict(from_attributes=True)

    lesson_id: int
    status: ProgressStatusValue
    score: int | None = None
    time_spent_seconds: int
    started_at: UTCDateTime
    completed_at: UTCDateTime | None = None


class ProgressListResponse(BaseModel):
    """All progress of the session's kid."""

    data: list[ProgressSummary]


class ProgressDetailResponse(BaseModel):
    """Progress for one lesson, or null when the lesson was never started."""

    data: ProgressRecord | None
