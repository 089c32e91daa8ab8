# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Administrator password hashing using bcrypt.

The administrator (CMS) secret is configured per deployment, either as a
bcrypt hash or as a plaintext password that is hashed once at startup.
Family passwords use the PBKDF2 pool in credentials.py instead.

Example:
    >>> hasher = PasswordHasher(rounds=4)
    >>> hashed = hasher.hash("my_password")
    >>> hasher.verify("my_password", hashed)
    True
"""

import logging
import re

import bcrypt

from kidspark.core.config.settings import AdminSettings

logger = logging.getLogger(__name__)

_ROUNDS_PATTERN = re.compile(r"^\$2[abxy]\$(\d{2})\$")


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Attributes:
        _rounds: Number of bcrypt rounds for hashing.

    Example:
        >>> hasher = PasswordHasher()
        >>> hashed = hasher.hash("secure_password")
        >>> hasher.verify("wrong_password", hashed)
        False
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds. Higher is more secure but slower.
                   Default is 12 which takes ~250ms on modern hardware.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password to verify.
            password_hash: Bcrypt hash to verify against.

        Returns:
            True if password matches the hash, False otherwise.
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.warning("Password verification failed: %s", str(e))
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a hash was produced with a different round count.

        Args:
            password_hash: Existing password hash to check.

        Returns:
            True if the hash should be updated, False otherwise.
        """
        if not password_hash:
            return False

        match = _ROUNDS_PATTERN.match(password_hash)
        if not match:
            return False
        return int(match.group(1)) != self._rounds


class AdminPassword:
    """The configured administrator secret.

    Built once per application from AdminSettings. A configured bcrypt hash
    is used as-is; otherwise the plaintext password is hashed on
    construction so that every login goes through bcrypt.

    Example:
        >>> admin = AdminPassword.from_settings(settings.admin)
        >>> admin.check("letmein")
        False
    """

    def __init__(self, password_hash: str | None, hasher: PasswordHasher) -> None:
        """Initialize with an already hashed secret.

        Args:
            password_hash: bcrypt hash, or None to reject every login.
            hasher: Hasher used for verification.
        """
        self._password_hash = password_hash
        self._hasher = hasher

    @classmethod
    def from_settings(cls, settings: AdminSettings) -> "AdminPassword":
        """Build the administrator secret from configuration."""
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

        if settings.password_hash is not None:
            password_hash = settings.password_hash.get_secret_value() or None
            if password_hash and hasher.needs_rehash(password_hash):
                logger.info("Admin password hash uses a different bcrypt cost than configured")
            return cls(password_hash, hasher)

        plaintext = settings.password.get_secret_value()
        if not plaintext:
            logger.warning("No admin password configured, admin login is disabled")
            return cls(None, hasher)
        return cls(hasher.hash(plaintext), hasher)

    @property
    def is_configured(self) -> bool:
        """Whether any administrator login can succeed."""
        return self._password_hash is not None

    def check(self, candidate: str) -> bool:
        """Check a login attempt against the administrator secret."""
        if self._password_hash is None:
            return False
        return self._hasher.verify(candidate, self._password_hash)
