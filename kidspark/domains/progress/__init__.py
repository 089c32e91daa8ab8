# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson progress domain."""

from kidspark.domains.progress.service import ProgressStore

__all__ = ["ProgressStore"]
