# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Family access password schemas.

Hashes and salts never appear in any response model.
"""

from pydantic import BaseModel, ConfigDict, Field

from kidspark.models.common import UTCDateTime


class CredentialCreateRequest(BaseModel):
    """Add a password to the family pool."""

    label: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)


class CredentialSummary(BaseModel):
    """Credential listing entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str
    created_at: UTCDateTime
    last_used_at: UTCDateTime | None = None


class CredentialListResponse(BaseModel):
    """List of credentials."""

    data: list[CredentialSummary]


class CredentialDetailResponse(BaseModel):
    """Single credential."""

    data: CredentialSummary
