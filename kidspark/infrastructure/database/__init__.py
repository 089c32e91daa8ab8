# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the relational datastore.

This package provides SQLAlchemy async database connections and the ORM
models for kids, family credentials, sessions and lesson progress.

Example:
    from kidspark.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(Kid))
"""

from kidspark.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    build_sessionmaker,
    check_database_connection,
    close_database,
    create_schema,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "build_engine",
    "build_sessionmaker",
    "check_database_connection",
    "close_database",
    "create_schema",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
