# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session models.

Both session kinds use the bearer token itself as primary key, so
validation is a single primary-key lookup and revocation is a delete.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kidspark.infrastructure.database.models.base import Base, CreatedAtMixin


class AdminSession(CreatedAtMixin, Base):
    """Administrator (CMS) session."""

    __tablename__ = "admin_sessions"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )


class KidSession(CreatedAtMixin, Base):
    """Learner session bound to one kid and the credential that unlocked it."""

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    kid_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("kids.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    password_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("access_passwords.id", ondelete="SET NULL"),
        nullable=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    @property
    def credential_id(self) -> int | None:
        """Identifier of the credential that unlocked this session."""
        return self.password_id
