# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kid profile domain."""

from kidspark.domains.kid.service import KidNotFoundError, KidService

__all__ = ["KidService", "KidNotFoundError"]
