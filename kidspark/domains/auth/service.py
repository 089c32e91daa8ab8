# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for the administrator and learner flows.

This module provides the AuthService that orchestrates:
- Administrator login against the configured bcrypt secret
- Family password verification and kid session creation
- Session checks and logout for both session kinds

Example:
    >>> auth_service = AuthService(db, sessions, credentials, admin_password)
    >>> token = await auth_service.verify_kid(password="sunflower", kid_id=5)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.domains.auth.credentials import CredentialStore
from kidspark.domains.auth.password import AdminPassword
from kidspark.domains.auth.sessions import SessionManager
from kidspark.domains.kid.service import KidNotFoundError
from kidspark.infrastructure.database.models import Kid

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base exception for authentication errors."""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when a password matches neither the admin secret nor any family credential."""

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


class AuthService:
    """Authentication flows for administrators and kids.

    Attributes:
        _db: Database session for queries.
        _sessions: Session manager.
        _credentials: Family credential pool.
        _admin_password: Configured administrator secret.
    """

    def __init__(
        self,
        db: AsyncSession,
        sessions: SessionManager,
        credentials: CredentialStore,
        admin_password: AdminPassword,
    ) -> None:
        """Initialize the authentication service.

        Args:
            db: Async database session.
            sessions: Session manager bound to the same database session.
            credentials: Family credential pool.
            admin_password: Administrator secret.
        """
        self._db = db
        self._sessions = sessions
        self._credentials = credentials
        self._admin_password = admin_password

    async def login_admin(self, password: str) -> str:
        """Open an administrator session.

        Args:
            password: Candidate administrator password.

        Returns:
            Administrator session token.

        Raises:
            InvalidCredentialsError: If the password is wrong.
        """
        if not self._admin_password.check(password):
            logger.info("Admin login rejected")
            raise InvalidCredentialsError()
        return await self._sessions.create_admin_session()

    async def logout_admin(self, token: str | None) -> None:
        """Revoke an administrator session if one is present."""
        await self._sessions.revoke_admin(token)

    async def is_admin(self, token: str | None) -> bool:
        """Check whether a token belongs to a live administrator session."""
        return await self._sessions.validate_admin(token) is not None

    async def verify_kid(self, password: str, kid_id: int) -> str:
        """Unlock the learner app for one kid.

        The password is tried against every family credential; the new
        session is bound to the kid and to the credential that matched.
        The password is checked before the kid id.

        Args:
            password: Candidate family password.
            kid_id: Kid the session will act for.

        Returns:
            Kid session token.

        Raises:
            InvalidCredentialsError: If no credential matches.
            KidNotFoundError: If the kid does not exist.
        """
        credential = await self._credentials.match(password)
        if credential is None:
            logger.info("Family password rejected")
            raise InvalidCredentialsError()

        kid = await self._db.get(Kid, kid_id)
        if kid is None:
            raise KidNotFoundError(kid_id)

        await self._credentials.touch(credential)
        return await self._sessions.create_kid_session(kid.id, credential.id)

    async def logout_kid(self, token: str | None) -> None:
        """Revoke a kid session if one is present."""
        await self._sessions.revoke_kid(token)

    async def current_kid(self, token: str | None) -> Kid | None:
        """Resolve the kid behind a live kid session."""
        session = await self._sessions.validate_kid(token)
        if session is None:
            return None
        return await self._db.get(Kid, session.kid_id)
