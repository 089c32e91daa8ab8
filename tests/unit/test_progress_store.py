# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for ProgressStore upsert rules."""

import json

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.domains.progress import ProgressStore
from kidspark.infrastructure.database.models import Kid, Progress
from kidspark.models.progress import ProgressUpdateRequest
from kidspark.utils.datetime import ensure_utc


@pytest.fixture
def store(db: AsyncSession, clock) -> ProgressStore:
    """Provide a store with a controllable clock."""
    return ProgressStore(db, clock=clock)


class TestUpsertInsert:
    """Tests for the first write of a lesson."""

    async def test_defaults_for_absent_fields(self, store: ProgressStore, kid: Kid, clock) -> None:
        """Test that a bare patch starts the lesson."""
        await store.upsert(kid.id, 10, {})

        row = await store.get(kid.id, 10)
        assert row is not None
        assert row.status == "in_progress"
        assert row.time_spent_seconds == 0
        assert row.score is None
        assert row.answers_json is None
        assert ensure_utc(row.started_at) == clock.now
        assert row.completed_at is None

    async def test_first_write_completed_sets_completed_at(
        self,
        store: ProgressStore,
        kid: Kid,
        clock,
    ) -> None:
        """Test that completing on insert stamps completed_at."""
        await store.upsert(kid.id, 10, {"status": "completed", "score": 3})

        row = await store.get(kid.id, 10)
        assert row.status == "completed"
        assert ensure_utc(row.completed_at) == clock.now


class TestUpsertMerge:
    """Tests for writes to an existing row."""

    async def test_completed_at_set_once(self, store: ProgressStore, kid: Kid, clock) -> None:
        """Test that a second completion leaves completed_at unchanged."""
        await store.upsert(kid.id, 10, {"status": "completed"})
        first = ensure_utc((await store.get(kid.id, 10)).completed_at)

        clock.advance(minutes=5)
        await store.upsert(kid.id, 10, {"status": "completed"})

        assert ensure_utc((await store.get(kid.id, 10)).completed_at) == first

    async def test_completed_at_set_on_first_transition(
        self,
        store: ProgressStore,
        kid: Kid,
        clock,
    ) -> None:
        """Test that completed_at is stamped when an existing row completes."""
        await store.upsert(kid.id, 10, {"status": "in_progress"})
        clock.advance(minutes=3)
        await store.upsert(kid.id, 10, {"status": "completed"})

        assert ensure_utc((await store.get(kid.id, 10)).completed_at) == clock.now

    async def test_null_score_keeps_stored_score(self, store: ProgressStore, kid: Kid) -> None:
        """Test that an absent or null score never erases a stored one."""
        await store.upsert(kid.id, 10, {"score": 8})
        await store.upsert(kid.id, 10, {"score": None})
        await store.upsert(kid.id, 10, {})

        assert (await store.get(kid.id, 10)).score == 8

    async def test_new_score_overwrites(self, store: ProgressStore, kid: Kid) -> None:
        """Test that a newer non-null score replaces the stored one."""
        await store.upsert(kid.id, 10, {"score": 8})
        await store.upsert(kid.id, 10, {"score": 5})

        assert (await store.get(kid.id, 10)).score == 5

    async def test_answers_kept_when_absent(self, store: ProgressStore, kid: Kid) -> None:
        """Test that answers_json is only replaced by a new value."""
        await store.upsert(kid.id, 10, {"answers_json": '{"current_page": 2}'})
        await store.upsert(kid.id, 10, {"status": "in_progress"})

        assert (await store.get(kid.id, 10)).answers_json == '{"current_page": 2}'

    async def test_time_spent_overwritten_even_when_absent(
        self,
        store: ProgressStore,
        kid: Kid,
    ) -> None:
        """Test that time_spent_seconds is replaced and resets to 0 when absent."""
        await store.upsert(kid.id, 10, {"time_spent_seconds": 120})
        assert (await store.get(kid.id, 10)).time_spent_seconds == 120

        await store.upsert(kid.id, 10, {"time_spent_seconds": 30})
        assert (await store.get(kid.id, 10)).time_spent_seconds == 30

        await store.upsert(kid.id, 10, {})
        assert (await store.get(kid.id, 10)).time_spent_seconds == 0

    async def test_started_at_immutable(self, store: ProgressStore, kid: Kid, clock) -> None:
        """Test that later writes never move started_at."""
        await store.upsert(kid.id, 10, {})
        started = clock.now

        clock.advance(hours=1)
        await store.upsert(kid.id, 10, {"status": "completed"})

        assert ensure_utc((await store.get(kid.id, 10)).started_at) == started

    async def test_status_can_regress_and_completed_at_is_kept(
        self,
        store: ProgressStore,
        kid: Kid,
    ) -> None:
        """Test that a completed lesson can go back to in_progress."""
        await store.upsert(kid.id, 10, {"status": "completed"})
        await store.upsert(kid.id, 10, {"status": "in_progress"})

        row = await store.get(kid.id, 10)
        assert row.status == "in_progress"
        assert row.completed_at is not None

    async def test_one_row_per_kid_and_lesson(self, store: ProgressStore, db: AsyncSession, kid: Kid) -> None:
        """Test that repeated writes never create duplicates."""
        for _ in range(3):
            await store.upsert(kid.id, 10, {"status": "in_progress"})
        await store.upsert(kid.id, 11, {})

        count = await db.scalar(select(func.count()).select_from(Progress))
        assert count == 2

    async def test_accepts_request_model(self, store: ProgressStore, kid: Kid) -> None:
        """Test upserting a validated request with structured answers."""
        patch = ProgressUpdateRequest.model_validate({"answers_blob": {"placed": 1, "total": 4}})

        await store.upsert(kid.id, 10, patch)

        stored = (await store.get(kid.id, 10)).answers_json
        assert json.loads(stored) == {"placed": 1, "total": 4}


class TestReads:
    """Tests for get and list."""

    async def test_get_unknown_returns_none(self, store: ProgressStore, kid: Kid) -> None:
        """Test that a never-started lesson has no row."""
        assert await store.get(kid.id, 99) is None

    async def test_list_is_scoped_to_kid_and_ordered(
        self,
        store: ProgressStore,
        db: AsyncSession,
        kid: Kid,
    ) -> None:
        """Test that a kid only sees its own rows, ordered by lesson."""
        sibling = Kid(name="Leo", age=9)
        db.add(sibling)
        await db.commit()

        await store.upsert(kid.id, 12, {})
        await store.upsert(kid.id, 10, {})
        await store.upsert(sibling.id, 11, {})

        assert [row.lesson_id for row in await store.list(kid.id)] == [10, 12]
        assert [row.lesson_id for row in await store.list(sibling.id)] == [11]
