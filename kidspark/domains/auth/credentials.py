# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Family access password hashing and the credential pool.

Family passwords are stored as PBKDF2-HMAC-SHA256 derived keys together
with their random salt and iteration count, all base64 encoded. Rows
written by earlier deployments keep verifying because the iteration count
travels with each row.

There is no lockout or attempt counting: the cost of the key derivation is
the only brute-force deterrent. Verifying against a pool of N credentials
costs up to N derivations, evaluated one after another.

Example:
    >>> hasher = CredentialHasher(iterations=1000)
    >>> hashed = hasher.hash("sunflower")
    >>> hasher.verify("sunflower", hashed.hash, hashed.salt, hashed.iterations)
    True
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
from typing import NamedTuple, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from kidspark.infrastructure.database.models import Credential
from kidspark.utils.datetime import utc_now

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 100_000
DEFAULT_SALT_BYTES = 16
DEFAULT_KEY_BYTES = 32
DIGEST = "sha256"


class HashedPassword(NamedTuple):
    """Result of hashing a family password."""

    hash: str
    salt: str
    iterations: int


class CredentialHasher:
    """PBKDF2 key derivation for family passwords.

    Attributes:
        _iterations: Iteration count used for new hashes.
        _salt_bytes: Length of the random salt.
        _key_bytes: Length of the derived key.
    """

    def __init__(
        self,
        iterations: int = DEFAULT_ITERATIONS,
        salt_bytes: int = DEFAULT_SALT_BYTES,
        key_bytes: int = DEFAULT_KEY_BYTES,
    ) -> None:
        """Initialize the hasher.

        Args:
            iterations: PBKDF2 iteration count for new hashes.
            salt_bytes: Random salt length, at least 16 bytes.
            key_bytes: Derived key length.

        Raises:
            ValueError: If a parameter is out of range.
        """
        if iterations < 1:
            raise ValueError("Iteration count must be positive")
        if salt_bytes < 16:
            raise ValueError("Salt must be at least 16 bytes")
        self._iterations = iterations
        self._salt_bytes = salt_bytes
        self._key_bytes = key_bytes

    @property
    def iterations(self) -> int:
        """Iteration count applied to new hashes."""
        return self._iterations

    def hash(self, password: str) -> HashedPassword:
        """Hash a password with a fresh random salt.

        Args:
            password: Plain text password.

        Returns:
            HashedPassword with base64 derived key, base64 salt and the
            iteration count used.

        Raises:
            ValueError: If password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = secrets.token_bytes(self._salt_bytes)
        derived = self._derive(password, salt, self._iterations)
        return HashedPassword(
            hash=base64.b64encode(derived).decode("ascii"),
            salt=base64.b64encode(salt).decode("ascii"),
            iterations=self._iterations,
        )

    def verify(self, password: str, password_hash: str, salt: str, iterations: int) -> bool:
        """Check a password against a stored derived key.

        The comparison runs in constant time. Keys of different length are
        rejected before comparing.

        Args:
            password: Plain text password to check.
            password_hash: Stored base64 derived key.
            salt: Stored base64 salt.
            iterations: Stored iteration count.

        Returns:
            True if the password matches, False otherwise.
        """
        if not password or not password_hash or not salt or iterations < 1:
            return False

        try:
            salt_bytes = base64.b64decode(salt, validate=True)
            expected = base64.b64decode(password_hash, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Stored credential is not valid base64")
            return False

        try:
            derived = self._derive(password, salt_bytes, iterations)
        except UnicodeEncodeError:
            return False

        if len(derived) != len(expected):
            return False
        return hmac.compare_digest(derived, expected)

    def _derive(self, password: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac(
            DIGEST,
            password.encode("utf-8"),
            salt,
            iterations,
            dklen=self._key_bytes,
        )


class CredentialStore:
    """The shared family credential pool.

    Attributes:
        _db: Database session for queries.
        _hasher: Key derivation used for hashing and verification.

    Example:
        >>> store = CredentialStore(db, CredentialHasher())
        >>> credential = await store.match("sunflower")
    """

    def __init__(self, db: AsyncSession, hasher: CredentialHasher | None = None) -> None:
        """Initialize the credential store.

        Args:
            db: Async database session.
            hasher: Key derivation. Defaults to CredentialHasher().
        """
        self._db = db
        self._hasher = hasher or CredentialHasher()

    def hash(self, password: str) -> HashedPassword:
        """Hash a password with a fresh salt."""
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str, salt: str, iterations: int) -> bool:
        """Verify a password against stored hash parameters."""
        return self._hasher.verify(password, password_hash, salt, iterations)

    async def match(self, password: str) -> Credential | None:
        """Find the first stored credential the password unlocks.

        Credentials are tried sequentially in id order and the scan stops at
        the first match.

        Args:
            password: Plain text password.

        Returns:
            The matching Credential, or None.
        """
        if not password:
            return None

        result = await self._db.execute(select(Credential).order_by(Credential.id))
        for credential in result.scalars():
            if self._hasher.verify(
                password,
                credential.password_hash,
                credential.salt,
                credential.iterations,
            ):
                return credential
        return None

    async def touch(self, credential: Credential) -> None:
        """Record that a credential was just used to open a session."""
        credential.last_used_at = utc_now()
        await self._db.flush()

    async def list_credentials(self) -> Sequence[Credential]:
        """List credentials, newest first."""
        result = await self._db.execute(
            select(Credential).order_by(Credential.created_at.desc(), Credential.id.desc())
        )
        return result.scalars().all()

    async def create(self, label: str, password: str) -> Credential:
        """Add a password to the pool.

        Args:
            label: Display label (e.g. "Grandma's password").
            password: Plain text password.

        Returns:
            The stored Credential.
        """
        hashed = self._hasher.hash(password)
        credential = Credential(
            label=label,
            password_hash=hashed.hash,
            salt=hashed.salt,
            iterations=hashed.iterations,
        )
        self._db.add(credential)
        await self._db.commit()
        await self._db.refresh(credential)

        logger.info("Credential created: %s", credential.id)
        return credential

    async def delete(self, credential_id: int) -> bool:
        """Remove a password from the pool.

        Returns:
            True if a row was deleted, False if it did not exist.
        """
        result = await self._db.execute(
            delete(Credential).where(Credential.id == credential_id)
        )
        await self._db.commit()

        deleted = (result.rowcount or 0) > 0
        if deleted:
            logger.info("Credential deleted: %s", credential_id)
        return deleted
