# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Session cookie helpers.

Session tokens travel in HttpOnly, SameSite=Lax cookies scoped to the
whole site. Clearing a cookie sends the same attributes with Max-Age=0.
"""

from fastapi import Response

from kidspark.core.config.settings import SessionSettings


def set_session_cookie(
    response: Response,
    name: str,
    token: str,
    max_age: int,
    settings: SessionSettings,
) -> None:
    """Attach a session cookie and mark the response uncacheable."""
    response.set_cookie(
        key=name,
        value=token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    response.headers["Cache-Control"] = "no-store"


def clear_session_cookie(response: Response, name: str, settings: SessionSettings) -> None:
    """Expire a session cookie on the client."""
    set_session_cookie(response, name, "", 0, settings)
