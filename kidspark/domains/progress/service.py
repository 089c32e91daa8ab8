# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress persistence.

Every write is one native INSERT ... ON CONFLICT (kid_id, lesson_id)
DO UPDATE statement, so concurrent writers for the same kid and lesson need
no explicit locking. Field rules applied on conflict:

- status: overwritten by the incoming value (no monotonicity check, a
  completed lesson can go back to in_progress).
- score: kept unless a new value is sent.
- time_spent_seconds: overwritten; callers send a cumulative total.
- answers_json: kept unless a new value is sent.
- completed_at: set on the first write with status completed, then frozen.
- started_at: set on insert only.

Example:
    >>> store = ProgressStore(db)
    >>> await store.upsert(5, 10, ProgressUpdateRequest(status="completed", score=8))
    >>> (await store.get(5, 10)).completed_at is not None
    True
"""

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from sqlalchemy import and_, case, func, literal, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.infrastructure.database.connection import DatabaseError
from kidspark.infrastructure.database.models import Progress, ProgressStatus
from kidspark.models.progress import ProgressUpdateRequest
from kidspark.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProgressStore:
    """Per-kid, per-lesson progress records.

    Attributes:
        _db: Database session for queries.
        _clock: Source of the current time.
    """

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utc_now) -> None:
        """Initialize the progress store.

        Args:
            db: Async database session.
            clock: Returns the current timezone-aware UTC time.
        """
        self._db = db
        self._clock = clock

    def _insert(self) -> Any:
        dialect = self._db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise DatabaseError(f"Upsert is not supported on dialect: {dialect}")
        return insert(Progress)

    async def upsert(
        self,
        kid_id: int,
        lesson_id: int,
        patch: ProgressUpdateRequest | Mapping[str, Any],
    ) -> None:
        """Insert or merge progress for one kid and lesson.

        Args:
            kid_id: Kid the progress belongs to.
            lesson_id: Lesson the progress refers to.
            patch: Partial update. A missing status means in_progress and a
                missing time_spent_seconds means 0.
        """
        if not isinstance(patch, ProgressUpdateRequest):
            patch = ProgressUpdateRequest.model_validate(patch)

        now = self._clock()
        status = patch.status or ProgressStatus.IN_PROGRESS.value
        completed = status == ProgressStatus.COMPLETED.value

        stmt = self._insert().values(
            kid_id=kid_id,
            lesson_id=lesson_id,
            status=status,
            score=patch.score,
            time_spent_seconds=patch.time_spent_seconds or 0,
            answers_json=patch.answers_json,
            started_at=now,
            completed_at=now if completed else None,
        )
        excluded = stmt.excluded
        stmt = stmt.on_conflict_do_update(
            index_elements=[Progress.kid_id, Progress.lesson_id],
            set_={
                "status": excluded.status,
                "score": func.coalesce(excluded.score, Progress.score),
                "time_spent_seconds": excluded.time_spent_seconds,
                "answers_json": func.coalesce(excluded.answers_json, Progress.answers_json),
                "completed_at": case(
                    (
                        and_(
                            excluded.status == ProgressStatus.COMPLETED.value,
                            Progress.completed_at.is_(None),
                        ),
                        literal(now, type_=Progress.completed_at.type),
                    ),
                    else_=Progress.completed_at,
                ),
            },
        )

        await self._db.execute(stmt)
        await self._db.commit()

        logger.debug("Progress upserted: kid=%s lesson=%s status=%s", kid_id, lesson_id, status)

    async def get(self, kid_id: int, lesson_id: int) -> Progress | None:
        """Read the progress for one lesson, or None if never started."""
        stmt = (
            select(Progress)
            .where(Progress.kid_id == kid_id, Progress.lesson_id == lesson_id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self, kid_id: int) -> Sequence[Progress]:
        """Read every progress row of a kid, ordered by lesson."""
        stmt = (
            select(Progress)
            .where(Progress.kid_id == kid_id)
            .order_by(Progress.lesson_id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return result.scalars().all()
