# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""KidSpark HTTP API.

Example:
    uvicorn kidspark.api.app:create_app --factory
"""

from kidspark.api.app import create_app

__all__ = ["create_app"]
