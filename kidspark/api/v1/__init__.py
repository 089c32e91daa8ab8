# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API routes package.

Each module provides a FastAPI router for one endpoint group.

Modules:
    admin_auth: Administrator login, logout and session check.
    session: Kid password verification, session check and logout.
    progress: Lesson progress read and upsert for the session's kid.
    learn: Public learner endpoints (kid picker).
    passwords: Family access password administration.
    kids: Kid profile administration.
"""

from fastapi import APIRouter

from kidspark.api.v1 import admin_auth, kids, learn, passwords, progress, session

# Create the main API router
router = APIRouter(prefix="/api")

# Include domain routers
router.include_router(admin_auth.router, prefix="/auth/admin", tags=["Admin Authentication"])
router.include_router(session.router, prefix="/auth", tags=["Kid Session"])
router.include_router(learn.router, prefix="/learn", tags=["Learn"])
router.include_router(progress.router, prefix="/learn", tags=["Progress"])
router.include_router(passwords.router, prefix="/admin/passwords", tags=["Access Passwords"])
router.include_router(kids.router, prefix="/admin/kids", tags=["Kids"])

__all__ = ["router"]
