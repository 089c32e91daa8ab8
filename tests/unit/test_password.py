# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for administrator password hashing.

Tests the PasswordHasher class and the AdminPassword secret.
"""

import pytest
from pydantic import SecretStr

from kidspark.core.config import AdminSettings
from kidspark.domains.auth.password import AdminPassword, PasswordHasher


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_password_returns_bcrypt_hash(self) -> None:
        """Test that hashing returns a bcrypt hash string."""
        hashed = PasswordHasher(rounds=4).hash("cms-secret")

        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60

    def test_verify_correct_and_incorrect_password(self) -> None:
        """Test verification with right and wrong passwords."""
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("cms-secret")

        assert hasher.verify("cms-secret", hashed) is True
        assert hasher.verify("wrong", hashed) is False

    def test_verify_empty_inputs_return_false(self) -> None:
        """Test that empty password or hash never verifies."""
        hasher = PasswordHasher(rounds=4)

        assert hasher.verify("", hasher.hash("x")) is False
        assert hasher.verify("x", "") is False

    def test_verify_invalid_hash_returns_false(self) -> None:
        """Test that a malformed hash fails closed."""
        assert PasswordHasher(rounds=4).verify("cms-secret", "not-a-bcrypt-hash") is False

    def test_hash_empty_password_raises(self) -> None:
        """Test that empty passwords cannot be hashed."""
        with pytest.raises(ValueError):
            PasswordHasher(rounds=4).hash("")

    def test_needs_rehash(self) -> None:
        """Test detection of hashes made with another cost."""
        hashed = PasswordHasher(rounds=4).hash("cms-secret")

        assert PasswordHasher(rounds=4).needs_rehash(hashed) is False
        assert PasswordHasher(rounds=5).needs_rehash(hashed) is True
        assert PasswordHasher(rounds=4).needs_rehash("") is False


class TestAdminPassword:
    """Tests for AdminPassword."""

    def test_plaintext_setting_is_hashed(self) -> None:
        """Test that a plaintext password is accepted after hashing."""
        admin = AdminPassword.from_settings(
            AdminSettings(password=SecretStr("cms-secret"), bcrypt_rounds=4)
        )

        assert admin.is_configured is True
        assert admin.check("cms-secret") is True
        assert admin.check("cms-secrets") is False

    def test_hash_setting_is_used_as_is(self) -> None:
        """Test that a configured bcrypt hash takes precedence."""
        hashed = PasswordHasher(rounds=4).hash("from-hash")
        admin = AdminPassword.from_settings(
            AdminSettings(
                password=SecretStr("plaintext"),
                password_hash=SecretStr(hashed),
                bcrypt_rounds=4,
            )
        )

        assert admin.check("from-hash") is True
        assert admin.check("plaintext") is False

    def test_empty_secret_rejects_every_login(self) -> None:
        """Test that an unset secret disables administrator login."""
        admin = AdminPassword.from_settings(AdminSettings(password=SecretStr(""), bcrypt_rounds=4))

        assert admin.is_configured is False
        assert admin.check("") is False
        assert admin.check("anything") is False
