# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity players.

A player walks a kid through one lesson and reports progress to a
ProgressSink (in practice a ProgressBuffer). Intermediate steps are saved
as in_progress patches and debounced by the sink; completion is saved and
flushed immediately.

Each activity type has its own player:
- StoryPlayer: page through a story.
- QuizPlayer: answer questions one at a time.
- SandboxPlayer: place every item in its zone.

Example:
    >>> player = create_player(10, content, buffer, age=6)
    >>> player.start()
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Protocol, TypeVar

from kidspark.domains.activity.content import (
    AgeRange,
    QuizContent,
    QuizQuestion,
    SandboxContent,
    StoryContent,
    StoryPage,
    age_range,
)

logger = logging.getLogger(__name__)

ContentT = TypeVar("ContentT", StoryContent, QuizContent, SandboxContent)


class ActivityStateError(Exception):
    """Raised when an action is not valid in the player's current state."""

    pass


class ProgressSink(Protocol):
    """Receives progress patches from a player."""

    def save(self, lesson_id: int, patch: Mapping[str, Any]) -> None: ...

    def flush(self, lesson_id: int) -> None: ...


class ActivityPlayer(ABC, Generic[ContentT]):
    """Base class for activity players.

    Attributes:
        lesson_id: Lesson being played.
        content: Validated lesson content.
        age_range: Age bucket used for narration and hints.
        result: Completion data once the activity is finished.
    """

    def __init__(
        self,
        lesson_id: int,
        content: ContentT,
        sink: ProgressSink,
        age: int | None = None,
    ) -> None:
        self.lesson_id = lesson_id
        self.content = content
        self.age_range: AgeRange = age_range(age)
        self.result: dict[str, Any] | None = None
        self._sink = sink

    @property
    def completed(self) -> bool:
        return self.result is not None

    @property
    @abstractmethod
    def activity_type(self) -> str:
        """Content type handled by this player."""
        pass

    def _ensure_active(self) -> None:
        if self.completed:
            raise ActivityStateError(f"Lesson {self.lesson_id} is already completed")

    def _emit(self, answers: dict[str, Any]) -> None:
        self._sink.save(
            self.lesson_id,
            {"status": "in_progress", "answers_json": json.dumps(answers)},
        )

    def _complete(self, data: dict[str, Any]) -> dict[str, Any]:
        patch: dict[str, Any] = {
            "status": "completed",
            "answers_json": json.dumps(data),
        }
        score = data.get("score")
        if isinstance(score, int):
            patch["score"] = score

        self.result = data
        self._sink.save(self.lesson_id, patch)
        self._sink.flush(self.lesson_id)

        logger.info("Lesson %s completed (%s)", self.lesson_id, self.activity_type)
        return data


class StoryPlayer(ActivityPlayer[StoryContent]):
    """Pages through a story, one page at a time."""

    activity_type = "story"

    def __init__(self, lesson_id: int, content: StoryContent, sink: ProgressSink, age: int | None = None) -> None:
        super().__init__(lesson_id, content, sink, age)
        self._index: int | None = None

    @property
    def total_pages(self) -> int:
        return len(self.content.pages)

    @property
    def page_number(self) -> int:
        """1-based number of the current page, 0 before start()."""
        return 0 if self._index is None else self._index + 1

    @property
    def page(self) -> StoryPage:
        if self._index is None:
            raise ActivityStateError("Story has not been started")
        return self.content.pages[self._index]

    @property
    def narration(self) -> str:
        return self.page.narration_for(self.age_range)

    def start(self) -> StoryPage:
        """Open the first page."""
        self._ensure_active()
        if self._index is not None:
            raise ActivityStateError("Story already started")
        return self._go_to(0)

    def next(self) -> StoryPage | dict[str, Any]:
        """Advance one page, or finish the story from the last page.

        Returns:
            The new page, or the completion data after the last page.
        """
        self._ensure_active()
        if self._index is None:
            raise ActivityStateError("Story has not been started")
        if self._index == self.total_pages - 1:
            return self._complete({"pagesRead": self.total_pages, "totalPages": self.total_pages})
        return self._go_to(self._index + 1)

    def previous(self) -> StoryPage:
        """Go back one page."""
        self._ensure_active()
        if self._index is None:
            raise ActivityStateError("Story has not been started")
        if self._index == 0:
            raise ActivityStateError("Already on the first page")
        return self._go_to(self._index - 1)

    def _go_to(self, index: int) -> StoryPage:
        self._index = index
        self._emit({"current_page": index + 1, "total_pages": self.total_pages})
        return self.content.pages[index]


@dataclass(frozen=True)
class AnswerFeedback:
    """Outcome of confirming a quiz answer."""

    correct: bool
    correct_answer: str
    explanation: str
    hint: str | None = None


class QuizPlayer(ActivityPlayer[QuizContent]):
    """Asks each question once; every correct answer scores one point."""

    activity_type = "quiz"

    def __init__(self, lesson_id: int, content: QuizContent, sink: ProgressSink, age: int | None = None) -> None:
        super().__init__(lesson_id, content, sink, age)
        self._index = 0
        self._selected: str | None = None
        self._answered = False
        self.score = 0

    @property
    def total(self) -> int:
        return len(self.content.questions)

    @property
    def question(self) -> QuizQuestion:
        return self.content.questions[self._index]

    @property
    def selected(self) -> str | None:
        return self._selected

    @property
    def hint(self) -> str | None:
        return self.question.hints.for_range(self.age_range)

    def select(self, option_id: str) -> None:
        """Pick an option for the current question."""
        self._ensure_active()
        if self._answered:
            raise ActivityStateError("Question already answered")
        if self.question.option(option_id) is None:
            raise ActivityStateError(f"Unknown option: {option_id}")
        self._selected = option_id

    def confirm(self) -> AnswerFeedback:
        """Check the selected option against the correct answer."""
        self._ensure_active()
        if self._answered:
            raise ActivityStateError("Question already answered")
        if self._selected is None:
            raise ActivityStateError("No option selected")

        question = self.question
        correct = self._selected == question.correct_answer
        if correct:
            self.score += 1
        self._answered = True

        self._emit({"current_question": self._index + 1, "total": self.total})
        return AnswerFeedback(
            correct=correct,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            hint=None if correct else self.hint,
        )

    def next(self) -> QuizQuestion | dict[str, Any]:
        """Move to the next question, or finish after the last one.

        Returns:
            The next question, or the completion data after the last one.
        """
        self._ensure_active()
        if not self._answered:
            raise ActivityStateError("Current question has not been answered")
        if self._index == self.total - 1:
            return self._complete({"score": self.score, "totalQuestions": self.total})

        self._index += 1
        self._selected = None
        self._answered = False
        return self.question


class SandboxPlayer(ActivityPlayer[SandboxContent]):
    """Tap an item, then tap the zone it belongs in."""

    activity_type = "sandbox"

    def __init__(self, lesson_id: int, content: SandboxContent, sink: ProgressSink, age: int | None = None) -> None:
        super().__init__(lesson_id, content, sink, age)
        self._selected: str | None = None
        self.placements: dict[str, str] = {}

    @property
    def total(self) -> int:
        return len(self.content.items)

    @property
    def placed(self) -> int:
        return len(self.placements)

    @property
    def selected(self) -> str | None:
        return self._selected

    @property
    def hint(self) -> str | None:
        return self.content.hints.for_range(self.age_range)

    def select_item(self, item_id: str) -> str | None:
        """Select an unplaced item. Selecting the selected item clears it.

        Returns:
            The selected item id, or None when the selection was cleared.
        """
        self._ensure_active()
        if self.content.item(item_id) is None:
            raise ActivityStateError(f"Unknown item: {item_id}")
        if item_id in self.placements:
            raise ActivityStateError(f"Item already placed: {item_id}")

        self._selected = None if self._selected == item_id else item_id
        return self._selected

    def drop(self, zone_id: str) -> bool:
        """Drop the selected item on a zone.

        A wrong zone leaves the item selected so the kid can try again.

        Returns:
            True if the item belongs in the zone.
        """
        self._ensure_active()
        if self._selected is None:
            raise ActivityStateError("No item selected")

        item = self.content.item(self._selected)
        if item is None or item.target_zone != zone_id:
            return False

        self.placements[item.id] = zone_id
        self._selected = None
        self._emit({"placed": self.placed, "total": self.total})
        return True

    def finish(self) -> dict[str, Any]:
        """Complete the activity once every item is placed."""
        self._ensure_active()
        if self.placed < self.total:
            raise ActivityStateError(f"{self.total - self.placed} items still to place")
        return self._complete({})


def create_player(
    lesson_id: int,
    content: StoryContent | QuizContent | SandboxContent,
    sink: ProgressSink,
    age: int | None = None,
) -> StoryPlayer | QuizPlayer | SandboxPlayer:
    """Build the player for a lesson's content type.

    Args:
        lesson_id: Lesson being played.
        content: Parsed lesson content.
        sink: Receiver of progress patches.
        age: Kid's age, selects narration and hint variants.

    Returns:
        A player matching the content type.
    """
    match content:
        case StoryContent():
            return StoryPlayer(lesson_id, content, sink, age)
        case QuizContent():
            return QuizPlayer(lesson_id, content, sink, age)
        case SandboxContent():
            return SandboxPlayer(lesson_id, content, sink, age)
        case _:
            raise TypeError(f"Unsupported lesson content: {type(content).__name__}")
