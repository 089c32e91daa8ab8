# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request/response schemas.

Login bodies accept absent or empty fields so that the endpoints can
answer with their own status codes (401 for a missing admin password,
400 naming the fields for an incomplete verify request).
"""

from pydantic import BaseModel, Field

from kidspark.models.common import DB_INT_MAX, DB_INT_MIN
from kidspark.models.kid import KidSummary


class AdminLoginRequest(BaseModel):
    """Administrator login body."""

    password: str | None = Field(default=None, description="Administrator password")


class AdminCheckResponse(BaseModel):
    """Administrator session probe result."""

    authenticated: bool


class KidVerifyRequest(BaseModel):
    """Family password verification and kid selection."""

    password: str | None = Field(default=None, description="Family access password")
    kid_id: int | None = Field(
        default=None,
        ge=DB_INT_MIN,
        le=DB_INT_MAX,
        description="Kid the new session is bound to",
    )

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are absent or empty."""
        missing = []
        if not self.password:
            missing.append("password")
        if not self.kid_id:
            missing.append("kid_id")
        return missing


class KidCheckResponse(BaseModel):
    """Kid session probe result."""

    authenticated: bool
    kid: KidSummary | None = None
