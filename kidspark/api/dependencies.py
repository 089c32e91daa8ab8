# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get service instances bound to the request's session
- Require an administrator or kid session cookie

Example:
    @router.get("/progress")
    async def list_progress(
        session: CurrentKidSession,
        store: ProgressStoreDep,
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.core.config import Settings
from kidspark.domains.auth import (
    AdminPassword,
    AuthService,
    CredentialHasher,
    CredentialStore,
    SessionManager,
)
from kidspark.domains.kid import KidService
from kidspark.domains.progress import ProgressStore
from kidspark.infrastructure.database.connection import get_session
from kidspark.infrastructure.database.models import AdminSession, KidSession
from kidspark.models.common import DB_INT_MAX

logger = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession committed on success and rolled back on error.
    """
    async with get_session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


def get_admin_password(request: Request) -> AdminPassword:
    """Get the administrator secret built at application creation."""
    return request.app.state.admin_password


# =========================================================================
# Service Dependencies
# =========================================================================


def get_session_manager(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> SessionManager:
    """Get SessionManager instance."""
    return SessionManager(db, settings.session)


def get_credential_store(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> CredentialStore:
    """Get CredentialStore instance."""
    hasher = CredentialHasher(
        iterations=settings.credential.iterations,
        salt_bytes=settings.credential.salt_bytes,
        key_bytes=settings.credential.key_bytes,
    )
    return CredentialStore(db, hasher)


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
    credentials: CredentialStore = Depends(get_credential_store),
    admin_password: AdminPassword = Depends(get_admin_password),
) -> AuthService:
    """Get AuthService instance.

    Args:
        db: Database session.
        sessions: Session manager.
        credentials: Family credential pool.
        admin_password: Administrator secret.

    Returns:
        AuthService.
    """
    return AuthService(db, sessions, credentials, admin_password)


def get_kid_service(db: AsyncSession = Depends(get_db)) -> KidService:
    """Get KidService instance."""
    return KidService(db)


def get_progress_store(db: AsyncSession = Depends(get_db)) -> ProgressStore:
    """Get ProgressStore instance."""
    return ProgressStore(db)


# =========================================================================
# Authentication Dependencies
# =========================================================================


async def require_admin(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
) -> AdminSession:
    """Require a live administrator session cookie.

    Args:
        request: HTTP request.
        sessions: Session manager.
        settings: Application settings.

    Returns:
        The administrator session.

    Raises:
        HTTPException: 401 if the cookie is missing, expired or revoked.
    """
    token = request.cookies.get(settings.session.admin_cookie)
    session = await sessions.validate_admin(token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED)
    return session


async def require_kid_session(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
    settings: Settings = Depends(get_app_settings),
) -> KidSession:
    """Require a live kid session cookie.

    Args:
        request: HTTP request.
        sessions: Session manager.
        settings: Application settings.

    Returns:
        The kid session.

    Raises:
        HTTPException: 401 if the cookie is missing, expired or revoked.
    """
    token = request.cookies.get(settings.session.kid_cookie)
    session = await sessions.validate_kid(token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED)
    return session


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

DB = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]
KidServiceDep = Annotated[KidService, Depends(get_kid_service)]
ProgressStoreDep = Annotated[ProgressStore, Depends(get_progress_store)]
AdminUser = Annotated[AdminSession, Depends(require_admin)]
CurrentKidSession = Annotated[KidSession, Depends(require_kid_session)]

# Row id taken from the URL path
RowId = Annotated[int, Path(ge=1, le=DB_INT_MAX)]
