# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Family access password model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kidspark.infrastructure.database.models.base import Base, CreatedAtMixin


class Credential(CreatedAtMixin, Base):
    """A shared family access password.

    Several credentials may coexist; any of them unlocks the learner app.
    Only the PBKDF2 derived key, its salt and the iteration count are stored.
    """

    __tablename__ = "access_passwords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    salt: Mapped[str] = mapped_column(String(128), nullable=False)
    iterations: Mapped[int] = mapped_column(Integer, nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Credential(id={self.id}, label={self.label!r})>"
