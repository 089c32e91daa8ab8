# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson activities.

This package provides:
- The lesson content union (story, quiz, sandbox)
- Players that turn learner interaction into progress patches

Exports:
    parse_lesson_content: Validate stored lesson content.
    create_player: Build the player for a content type.
    ActivityStateError: Raised on invalid player transitions.
"""

from kidspark.domains.activity.content import (
    LessonContent,
    QuizContent,
    SandboxContent,
    StoryContent,
    age_range,
    parse_lesson_content,
)
from kidspark.domains.activity.players import (
    ActivityPlayer,
    ActivityStateError,
    AnswerFeedback,
    ProgressSink,
    QuizPlayer,
    SandboxPlayer,
    StoryPlayer,
    create_player,
)

__all__ = [
    "LessonContent",
    "StoryContent",
    "QuizContent",
    "SandboxContent",
    "age_range",
    "parse_lesson_content",
    "ActivityPlayer",
    "ActivityStateError",
    "AnswerFeedback",
    "ProgressSink",
    "StoryPlayer",
    "QuizPlayer",
    "SandboxPlayer",
    "create_player",
]
