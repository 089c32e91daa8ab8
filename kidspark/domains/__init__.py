# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services for KidSpark.

Each subpackage owns one part of the business logic:
- auth: family credentials, administrator password, sessions
- kid: kid profiles
- progress: per-lesson progress persistence
- activity: lesson content and the activity players that emit progress
"""
