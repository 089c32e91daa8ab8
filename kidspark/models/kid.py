# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kid profile schemas."""

from pydantic import BaseModel, ConfigDict, Field

from kidspark.models.common import UTCDateTime


class KidSummary(BaseModel):
    """Public projection of a kid, shown in the picker and session check."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar: str | None = None
    age: int


class KidResponse(KidSummary):
    """Full kid record for the administration surface."""

    created_at: UTCDateTime


class KidCreateRequest(BaseModel):
    """Create a kid profile."""

    name: str = Field(min_length=1, max_length=100)
    avatar: str | None = Field(default=None, max_length=255)
    age: int = Field(ge=0, le=18)


class KidUpdateRequest(BaseModel):
    """Partial kid update. Absent fields keep their stored value."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    avatar: str | None = Field(default=None, max_length=255)
    age: int | None = Field(default=None, ge=0, le=18)


class KidListResponse(BaseModel):
    """List of kids."""

    data: list[KidResponse]


class KidSummaryListResponse(BaseModel):
    """List of kid summaries for the learner picker."""

    data: list[KidSummary]


class KidDetailResponse(BaseModel):
    """Single kid."""

    data: KidResponse
