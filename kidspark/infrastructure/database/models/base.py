# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base for all KidSpark ORM models."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kidspark.utils.datetime import utc_now


class Base(DeclarativeBase):
    """Base class for all models."""


class CreatedAtMixin:
    """Adds a created_at column stamped at insert time."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
