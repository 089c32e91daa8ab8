# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for KidSpark.

Importing this package registers every table on Base.metadata.
"""

from kidspark.infrastructure.database.models.base import Base, CreatedAtMixin
from kidspark.infrastructure.database.models.credential import Credential
from kidspark.infrastructure.database.models.kid import Kid
from kidspark.infrastructure.database.models.progress import Progress, ProgressStatus
from kidspark.infrastructure.database.models.session import AdminSession, KidSession

__all__ = [
    "Base",
    "CreatedAtMixin",
    "Credential",
    "Kid",
    "Progress",
    "ProgressStatus",
    "AdminSession",
    "KidSession",
]
