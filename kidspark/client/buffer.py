# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Debounced progress buffer for the learner side.

Activity players report progress after every interaction. Sending each
patch would flood the API, so patches are merged per lesson and sent once
the lesson has been quiet for the debounce delay, or as soon as the caller
flushes (lesson completion, leaving the lesson, shutdown).

Delivery is best effort: a failed send is logged and dropped. There is no
retry and the patch is not re-queued.

Example:
    >>> async with ProgressBuffer(client.upsert_progress) as buffer:
    ...     with buffer.lesson(10):
    ...         buffer.save(10, {"status": "in_progress", "time_spent_seconds": 30})
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterator, Mapping

if TYPE_CHECKING:
    from kidspark.client.api import LearnClient

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 2.0

SendFn = Callable[[int, dict[str, Any]], Awaitable[Any]]


class ProgressBuffer:
    """Per-lesson write coalescing with a debounce timer.

    The buffer is owned by its caller and bound to one event loop. All
    methods except drain() and aclose() are synchronous and never block on
    the network.

    Attributes:
        _send: Coroutine function delivering one lesson's patch.
        _delay: Debounce delay in seconds.
        _pending: Merged, not yet sent patch per lesson.
        _timers: Scheduled flush per lesson.
        _inflight: Sends started and not yet finished.
    """

    def __init__(
        self,
        send: SendFn,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the buffer.

        Args:
            send: Called as ``await send(lesson_id, patch)`` on flush.
            delay: Quiet period before a lesson is flushed automatically.
            loop: Event loop for timers and sends. Defaults to the running
                loop at first use.
        """
        if delay < 0:
            raise ValueError("delay must be >= 0")

        self._send = send
        self._delay = delay
        self._loop = loop
        self._pending: dict[int, dict[str, Any]] = {}
        self._timers: dict[int, asyncio.TimerHandle] = {}
        self._inflight: set[asyncio.Task[None]] = set()

    @classmethod
    def for_client(cls, client: "LearnClient", delay: float | None = None) -> "ProgressBuffer":
        """Build a buffer that sends through a LearnClient."""
        if delay is None:
            delay = client.debounce_seconds
        return cls(client.upsert_progress, delay=delay)

    @property
    def delay(self) -> float:
        """Debounce delay in seconds."""
        return self._delay

    @property
    def pending_lessons(self) -> list[int]:
        """Lessons with unsent changes."""
        return list(self._pending)

    @property
    def in_flight(self) -> int:
        """Number of sends not yet finished."""
        return len(self._inflight)

    def pending(self, lesson_id: int) -> dict[str, Any] | None:
        """Return a copy of the unsent patch for a lesson."""
        patch = self._pending.get(lesson_id)
        return dict(patch) if patch is not None else None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def save(self, lesson_id: int, patch: Mapping[str, Any]) -> None:
        """Merge a patch into the lesson's pending state and restart its timer.

        Later values overwrite earlier ones key by key.

        Args:
            lesson_id: Lesson the patch belongs to.
            patch: Partial progress fields.
        """
        merged = self._pending.setdefault(lesson_id, {})
        merged.update(patch)

        timer = self._timers.pop(lesson_id, None)
        if timer is not None:
            timer.cancel()
        self._timers[lesson_id] = self._get_loop().call_later(self._delay, self.flush, lesson_id)

    def flush(self, lesson_id: int) -> asyncio.Task[None] | None:
        """Send a lesson's pending patch now.

        The pending state is cleared before the send completes; saves made
        while the send is in flight start a new batch.

        Returns:
            The send task, or None when nothing was pending.
        """
        timer = self._timers.pop(lesson_id, None)
        if timer is not None:
            timer.cancel()

        patch = self._pending.pop(lesson_id, None)
        if patch is None:
            return None

        task = self._get_loop().create_task(self._deliver(lesson_id, patch))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def flush_all(self) -> None:
        """Send every lesson with pending changes."""
        for lesson_id in list(self._pending):
            self.flush(lesson_id)

    @contextmanager
    def lesson(self, lesson_id: int) -> Iterator["ProgressBuffer"]:
        """Scope a lesson; its pending changes are flushed on exit."""
        try:
            yield self
        finally:
            self.flush(lesson_id)

    async def drain(self) -> None:
        """Wait for every in-flight send to finish."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def aclose(self) -> None:
        """Flush every lesson and wait for the sends."""
        self.flush_all()
        await self.drain()

    async def __aenter__(self) -> "ProgressBuffer":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _deliver(self, lesson_id: int, patch: dict[str, Any]) -> None:
        try:
            await self._send(lesson_id, patch)
            logger.debug("Progress sent for lesson %s", lesson_id)
        except Exception as e:
            logger.error(
                "Progress sync failed for lesson %s: %s",
                lesson_id,
                str(e),
                exc_info=True,
            )
