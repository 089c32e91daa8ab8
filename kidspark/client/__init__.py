# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learner-side progress synchronization.

Exports:
    LearnClient: httpx client for the learner API.
    ProgressBuffer: Debounced, per-lesson progress coalescing.
"""

from kidspark.client.api import LearnClient, LearnClientError
from kidspark.client.buffer import ProgressBuffer

__all__ = ["LearnClient", "LearnClientError", "ProgressBuffer"]
