# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

This package provides:
- Family credential hashing and the shared credential pool (PBKDF2)
- Administrator password checking (bcrypt)
- Session issuance, validation and revocation
- The AuthService orchestrating administrator and learner logins

Exports:
    CredentialHasher: PBKDF2 hashing of family passwords.
    CredentialStore: The family credential pool.
    PasswordHasher: bcrypt hashing for the administrator secret.
    AdminPassword: The configured administrator secret.
    SessionManager: Administrator and kid sessions.
    AuthService: Login, verify, check and logout flows.
"""

from kidspark.domains.auth.credentials import CredentialHasher, CredentialStore, HashedPassword
from kidspark.domains.auth.password import AdminPassword, PasswordHasher
from kidspark.domains.auth.service import (
    AuthenticationError,
    AuthService,
    InvalidCredentialsError,
)
from kidspark.domains.auth.sessions import SessionManager

__all__ = [
    "CredentialHasher",
    "CredentialStore",
    "HashedPassword",
    "PasswordHasher",
    "AdminPassword",
    "SessionManager",
    "AuthService",
    "AuthenticationError",
    "InvalidCredentialsError",
]
