# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson content models.

Lesson content is stored as a JSON document whose ``type`` field selects
one of three shapes: story, quiz or sandbox. The shapes are modeled as a
pydantic discriminated union so that each activity type carries only its
own fields.

Example:
    >>> content = parse_lesson_content('{"type": "quiz", "character": {...}, "questions": [...]}')
    >>> isinstance(content, QuizContent)
    True
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

AgeRange = Literal["3-5", "6-8", "9-12"]

DEFAULT_AGE = 7


def age_range(age: int | None) -> AgeRange:
    """Map a kid's age to the content age bucket.

    Args:
        age: Age in years, or None when unknown.

    Returns:
        The age range used to pick narration and hint variants.
    """
    if age is None:
        age = DEFAULT_AGE
    if age <= 5:
        return "3-5"
    if age <= 8:
        return "6-8"
    return "9-12"


class Character(BaseModel):
    """Guide character shown alongside the activity."""

    name: str
    avatar_key: str
    personality: str = ""


class Narration(BaseModel):
    narration: str


class AgeVariants(BaseModel):
    """Narration overrides per age range."""

    model_config = ConfigDict(populate_by_name=True)

    young: Narration | None = Field(default=None, alias="3-5")
    middle: Narration | None = Field(default=None, alias="6-8")
    older: Narration | None = Field(default=None, alias="9-12")

    def for_range(self, bucket: AgeRange) -> Narration | None:
        return {"3-5": self.young, "6-8": self.middle, "9-12": self.older}[bucket]


class AgeHints(BaseModel):
    """Hint text per age range."""

    model_config = ConfigDict(populate_by_name=True)

    young: str | None = Field(default=None, alias="3-5")
    middle: str | None = Field(default=None, alias="6-8")
    older: str | None = Field(default=None, alias="9-12")

    def for_range(self, bucket: AgeRange) -> str | None:
        return {"3-5": self.young, "6-8": self.middle, "9-12": self.older}[bucket]


# =============================================================================
# Story
# =============================================================================


class StoryChoice(BaseModel):
    label: str
    next_page_id: str
    feedback: str = ""


class StoryPage(BaseModel):
    """One page of a story."""

    id: str
    narration: str
    character_dialogue: str | None = None
    image_key: str | None = None
    choices: list[StoryChoice] | None = None
    age_variants: AgeVariants | None = None

    def narration_for(self, bucket: AgeRange) -> str:
        """Return the age-specific narration, falling back to the default."""
        if self.age_variants is not None:
            variant = self.age_variants.for_range(bucket)
            if variant is not None and variant.narration:
                return variant.narration
        return self.narration


class StoryContent(BaseModel):
    """Paged narrative."""

    type: Literal["story"]
    character: Character
    pages: list[StoryPage] = Field(min_length=1)


# =============================================================================
# Quiz
# =============================================================================


class QuizOption(BaseModel):
    id: str
    text: str
    image_key: str | None = None


class QuizQuestion(BaseModel):
    """A single multiple-choice question."""

    id: str
    question: str
    question_type: str = "multiple_choice"
    options: list[QuizOption] = Field(min_length=1)
    correct_answer: str
    explanation: str = ""
    hints: AgeHints = Field(default_factory=AgeHints)
    points: int = Field(default=1, ge=0)

    def option(self, option_id: str) -> QuizOption | None:
        return next((opt for opt in self.options if opt.id == option_id), None)


class QuizContent(BaseModel):
    """Sequence of questions with a running score."""

    type: Literal["quiz"]
    character: Character
    questions: list[QuizQuestion] = Field(min_length=1)
    passing_score: int | None = None
    completion_message: str | None = None


# =============================================================================
# Sandbox
# =============================================================================


class SandboxItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    label: str
    image_key: str | None = None
    category: str | None = None
    correct_zone_id: str | None = None

    @property
    def target_zone(self) -> str | None:
        """Zone the item belongs in. Older content uses ``correct_zone``."""
        if self.correct_zone_id is not None:
            return self.correct_zone_id
        extra = self.model_extra or {}
        legacy = extra.get("correct_zone")
        return legacy if isinstance(legacy, str) else None


class SandboxZone(BaseModel):
    id: str
    label: str
    accepts: list[str] = Field(default_factory=list)


class CompletionCriteria(BaseModel):
    type: str
    value: int | None = None


class SandboxContent(BaseModel):
    """Drag and drop style placement activity."""

    type: Literal["sandbox"]
    character: Character
    sandbox_type: Literal["drag_and_drop", "sorting", "matching"]
    items: list[SandboxItem] = Field(min_length=1)
    zones: list[SandboxZone] | None = None
    completion_criteria: CompletionCriteria
    hints: AgeHints = Field(default_factory=AgeHints)

    def item(self, item_id: str) -> SandboxItem | None:
        return next((item for item in self.items if item.id == item_id), None)


LessonContent = Annotated[
    Union[StoryContent, QuizContent, SandboxContent],
    Field(discriminator="type"),
]

_lesson_content_adapter = TypeAdapter(LessonContent)


def parse_lesson_content(raw: str | bytes | dict[str, Any]) -> StoryContent | QuizContent | SandboxContent:
    """Validate stored lesson content.

    Args:
        raw: JSON document or an already decoded mapping.

    Returns:
        The content model selected by the ``type`` field.

    Raises:
        pydantic.ValidationError: If the document is malformed or the type
            is unknown.
    """
    if isinstance(raw, (str, bytes)):
        return _lesson_content_adapter.validate_json(raw)
    return _lesson_content_adapter.validate_python(raw)
