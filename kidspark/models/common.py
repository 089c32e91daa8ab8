# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas shared by several endpoint groups."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from kidspark.utils.datetime import ensure_utc


def _to_utc(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


# Datetimes read back from SQLite are naive; normalize everything to UTC.
UTCDateTime = Annotated[datetime, BeforeValidator(_to_utc)]

# Range of the Integer columns (PostgreSQL INTEGER).
DB_INT_MIN = -2_147_483_648
DB_INT_MAX = 2_147_483_647


class OkResponse(BaseModel):
    """Acknowledgement returned by state-changing endpoints."""

    ok: bool = True


class ErrorResponse(BaseModel):
    """Error body returned for every non-2xx response."""

    error: str = Field(description="Human-readable error message")
    missing: list[str] | None = Field(
        default=None,
        description="Names of required fields absent from the request body",
    )
