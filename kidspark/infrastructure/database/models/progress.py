# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from kidspark.infrastructure.database.models.base import Base
from kidspark.utils.datetime import utc_now


class ProgressStatus(str, Enum):
    """Stored progress states. A missing row means not started."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Progress(Base):
    """A kid's interaction state with one lesson.

    Keyed by (kid_id, lesson_id). started_at is written at insert only and
    completed_at is written once, on the first transition to completed.
    """

    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("kid_id", "lesson_id", name="uq_progress_kid_lesson"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kid_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("kids.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lesson_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ProgressStatus.IN_PROGRESS.value,
    )
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    time_spent_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Progress(kid_id={self.kid_id}, lesson_id={self.lesson_id}, "
            f"status={self.status!r})>"
        )
