# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the learner API.

Wraps the /api/auth and /api/learn endpoints. The kid session cookie set
by verify() is kept in the client's cookie jar and sent on every later
request.

Example:
    >>> async with LearnClient("http://localhost:8000") as client:
    ...     await client.verify("sunflower", kid_id=5)
    ...     await client.upsert_progress(10, {"status": "in_progress"})
"""

import logging
from typing import Any, Mapping

import httpx

from kidspark.core.config.settings import ProgressClientSettings
from kidspark.models.auth import KidCheckResponse
from kidspark.models.kid import KidSummary
from kidspark.models.progress import ProgressRecord, ProgressSummary

logger = logging.getLogger(__name__)


class LearnClientError(Exception):
    """Raised when the API answers with an error status.

    Attributes:
        status_code: HTTP status of the response.
        message: Error message from the response body.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class LearnClient:
    """Async client for the learner endpoints.

    Attributes:
        _client: Underlying httpx client, owned unless one was passed in.
        _settings: Base URL, timeout and debounce defaults.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        settings: ProgressClientSettings | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root. Defaults to settings.base_url.
            timeout: Request timeout in seconds. Defaults to settings.timeout_seconds.
            client: Preconfigured httpx client (e.g. with an ASGI transport).
            settings: Client settings. Defaults to ProgressClientSettings().
        """
        self._settings = settings or ProgressClientSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or self._settings.base_url,
            timeout=timeout if timeout is not None else self._settings.timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    @property
    def debounce_seconds(self) -> float:
        return self._settings.debounce_seconds

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, path, **kwargs)
        if response.is_error:
            raise LearnClientError(response.status_code, self._error_message(response))
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and "error" in body:
            return str(body["error"])
        return str(body)

    async def verify(self, password: str, kid_id: int) -> None:
        """Unlock the learner app for a kid. Stores the session cookie."""
        await self._request("POST", "/api/auth/verify", json={"password": password, "kid_id": kid_id})
        logger.info("Kid session opened for kid: %s", kid_id)

    async def check(self) -> KidCheckResponse:
        """Return the current session state."""
        return KidCheckResponse.model_validate(await self._request("GET", "/api/auth/check"))

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")

    async def list_kids(self) -> list[KidSummary]:
        """List kids for the picker."""
        body = await self._request("GET", "/api/learn/kids")
        return [KidSummary.model_validate(kid) for kid in body["data"]]

    async def list_progress(self) -> list[ProgressSummary]:
        """List the session kid's progress."""
        body = await self._request("GET", "/api/learn/progress")
        return [ProgressSummary.model_validate(row) for row in body["data"]]

    async def get_progress(self, lesson_id: int) -> ProgressRecord | None:
        """Get the session kid's progress for one lesson."""
        body = await self._request("GET", f"/api/learn/progress/{lesson_id}")
        data = body.get("data")
        return ProgressRecord.model_validate(data) if data is not None else None

    async def upsert_progress(self, lesson_id: int, patch: Mapping[str, Any]) -> None:
        """Send one progress patch."""
        await self._request("POST", f"/api/learn/progress/{lesson_id}", json=dict(patch))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "LearnClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
