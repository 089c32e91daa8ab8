# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request context middleware.

Binds a request id to the structlog context for the lifetime of each
request and turns unhandled exceptions into a JSON 500 response.

Example:
    GET /api/learn/progress
    X-Request-ID: 5f0c...  (echoed back, generated when absent)
"""

import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from kidspark.utils.logging import bind_context, clear_context, get_logger

logger = logging.getLogger(__name__)
access_logger = get_logger("kidspark.access")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Per-request logging context and last-resort error handling."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request inside a bound logging context.

        Args:
            request: Incoming HTTP request.
            call_next: Next handler in the chain.

        Returns:
            The downstream response, or a 500 JSON error.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        bind_context(request_id=request_id, method=request.method, path=request.url.path)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = JSONResponse(status_code=500, content={"error": str(e)})
        finally:
            access_logger.info(
                "request_completed",
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
