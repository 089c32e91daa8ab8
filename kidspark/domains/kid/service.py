# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kid profile service.

Kids are referenced by sessions and progress but not owned by them.
Deleting a kid removes its sessions and progress through the foreign key
cascade.
"""

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.infrastructure.database.models import Kid
from kidspark.models.kid import KidCreateRequest, KidUpdateRequest

logger = logging.getLogger(__name__)


class KidNotFoundError(Exception):
    """Raised when a kid does not exist."""

    def __init__(self, kid_id: int) -> None:
        super().__init__(f"Kid not found: {kid_id}")
        self.kid_id = kid_id


class KidService:
    """CRUD for kid profiles."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_kids(self) -> Sequence[Kid]:
        """List kids ordered by name."""
        result = await self._db.execute(select(Kid).order_by(Kid.name.asc(), Kid.id.asc()))
        return result.scalars().all()

    async def find(self, kid_id: int) -> Kid | None:
        """Get a kid, or None when it does not exist."""
        return await self._db.get(Kid, kid_id)

    async def get(self, kid_id: int) -> Kid:
        """Get a kid.

        Raises:
            KidNotFoundError: If the kid does not exist.
        """
        kid = await self.find(kid_id)
        if kid is None:
            raise KidNotFoundError(kid_id)
        return kid

    async def create(self, data: KidCreateRequest) -> Kid:
        """Create a kid profile."""
        kid = Kid(name=data.name, avatar=data.avatar, age=data.age)
        self._db.add(kid)
        await self._db.commit()
        await self._db.refresh(kid)

        logger.info("Kid created: %s", kid.id)
        return kid

    async def update(self, kid_id: int, data: KidUpdateRequest) -> Kid:
        """Apply a partial update; absent fields keep their value.

        Raises:
            KidNotFoundError: If the kid does not exist.
        """
        kid = await self.get(kid_id)
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(kid, field, value)
        await self._db.commit()
        await self._db.refresh(kid)
        return kid

    async def delete(self, kid_id: int) -> None:
        """Delete a kid and, by cascade, its sessions and progress.

        Raises:
            KidNotFoundError: If the kid does not exist.
        """
        kid = await self.get(kid_id)
        await self._db.delete(kid)
        await self._db.commit()

        logger.info("Kid deleted: %s", kid_id)
