# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kid profile model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kidspark.infrastructure.database.models.base import Base, CreatedAtMixin


class Kid(CreatedAtMixin, Base):
    """A child profile selectable after family password verification.

    Kids own their progress rows and kid sessions; deleting a kid
    cascades to both.
    """

    __tablename__ = "kids"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Kid(id={self.id}, name={self.name!r})>"
