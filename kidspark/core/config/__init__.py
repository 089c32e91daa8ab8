# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for KidSpark.

Settings are Pydantic models loaded from environment variables (and an
optional .env file).

Example:
    >>> from kidspark.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.session.kid_ttl_days)
    7
"""

from kidspark.core.config.settings import (
    AdminSettings,
    CORSSettings,
    CredentialSettings,
    DatabaseSettings,
    ProgressClientSettings,
    SessionSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "CredentialSettings",
    "AdminSettings",
    "SessionSettings",
    "CORSSettings",
    "ProgressClientSettings",
]
