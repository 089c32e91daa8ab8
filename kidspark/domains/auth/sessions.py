# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session issuance, validation and revocation.

Two independent session kinds exist:
- Administrator sessions (CMS), 24 hour lifetime.
- Kid sessions (learner app), 7 day lifetime, bound to one kid and to the
  family credential that unlocked them.

Tokens are 32 random bytes, hex encoded, and are stored verbatim as the
primary key of their table. They carry no claims: validity is entirely a
datastore lookup, so revocation is immediate. Lifetimes are fixed at
creation; validation never extends them.

Example:
    >>> sessions = SessionManager(db, settings.session)
    >>> token = await sessions.create_kid_session(kid_id=5, credential_id=1)
    >>> session = await sessions.validate_kid(token)
    >>> session.kid_id
    5
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.core.config.settings import SessionSettings
from kidspark.infrastructure.database.models import AdminSession, KidSession
from kidspark.utils.datetime import utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SessionManager:
    """Issues and checks administrator and kid sessions.

    Attributes:
        _db: Database session for queries.
        _settings: Session lifetimes and token size.
        _clock: Source of the current time.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: SessionSettings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the session manager.

        Args:
            db: Async database session.
            settings: Session settings. Defaults to SessionSettings().
            clock: Returns the current timezone-aware UTC time.
        """
        self._db = db
        self._settings = settings or SessionSettings()
        self._clock = clock

    def _new_token(self) -> str:
        return secrets.token_hex(self._settings.token_bytes)

    async def create_admin_session(self) -> str:
        """Open an administrator session.

        Returns:
            The bearer token.
        """
        now = self._clock()
        token = self._new_token()
        self._db.add(
            AdminSession(
                id=token,
                created_at=now,
                expires_at=now + timedelta(hours=self._settings.admin_ttl_hours),
            )
        )
        await self._db.commit()

        logger.info("Admin session created")
        return token

    async def create_kid_session(self, kid_id: int, credential_id: int | None) -> str:
        """Open a learner session for one kid.

        Args:
            kid_id: Kid the session acts for.
            credential_id: Family credential that unlocked the session.

        Returns:
            The bearer token.
        """
        now = self._clock()
        token = self._new_token()
        self._db.add(
            KidSession(
                id=token,
                kid_id=kid_id,
                password_id=credential_id,
                created_at=now,
                expires_at=now + timedelta(days=self._settings.kid_ttl_days),
            )
        )
        await self._db.commit()

        logger.info("Kid session created for kid: %s", kid_id)
        return token

    async def validate_admin(self, token: str | None) -> AdminSession | None:
        """Return the administrator session if the token is live.

        A session is live only while its expiry is strictly in the future.
        """
        if not token:
            return None

        stmt = select(AdminSession).where(
            AdminSession.id == token,
            AdminSession.expires_at > self._clock(),
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def validate_kid(self, token: str | None) -> KidSession | None:
        """Return the kid session if the token is live.

        A session is live only while its expiry is strictly in the future.
        """
        if not token:
            return None

        stmt = select(KidSession).where(
            KidSession.id == token,
            KidSession.expires_at > self._clock(),
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def revoke_admin(self, token: str | None) -> None:
        """Delete an administrator session. Unknown tokens are ignored."""
        if not token:
            return
        await self._db.execute(delete(AdminSession).where(AdminSession.id == token))
        await self._db.commit()

    async def revoke_kid(self, token: str | None) -> None:
        """Delete a kid session. Unknown tokens are ignored."""
        if not token:
            return
        await self._db.execute(delete(KidSession).where(KidSession.id == token))
        await self._db.commit()

    async def purge_expired(self) -> int:
        """Delete every expired session of both kinds.

        Returns:
            Number of rows removed.
        """
        now = self._clock()
        admin_result = await self._db.execute(
            delete(AdminSession).where(AdminSession.expires_at <= now)
        )
        kid_result = await self._db.execute(
            delete(KidSession).where(KidSession.expires_at <= now)
        )
        await self._db.commit()

        removed = (admin_result.rowcount or 0) + (kid_result.rowcount or 0)
        if removed:
            logger.info("Purged %d expired sessions", removed)
        return removed
