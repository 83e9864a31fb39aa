"""Bearer authentication with single-flight token refresh."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sturdy.core.http import HTTPRequest

log = getLogger(__name__)

UNAUTHORIZED = 401


class RefreshingBearerAuthenticator:
    """Bearer authenticator that refreshes its token when the server answers 401.

    Concurrent callers that hit a 401 at the same time share one refresh: the
    first caller starts it, later callers await the same task, and the slot is
    cleared once it finishes so a later 401 can refresh again.
    """

    def __init__(
        self,
        initial_token: str,
        refresh: Callable[[], Awaitable[str]],
    ) -> None:
        self._token = initial_token
        self._refresh = refresh
        self._lock = asyncio.Lock()
        self._in_flight: asyncio.Task[str] | None = None

    @property
    def token(self) -> str:
        return self._token

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        return request.with_header("Authorization", f"Bearer {self._token}")

    async def attempt_refresh(self, status_code: int, body: bytes | None = None) -> bool:
        del body
        if status_code != UNAUTHORIZED:
            return False

        async with self._lock:
            task = self._in_flight
            if task is None:
                log.info("Access token rejected; refreshing")
                task = asyncio.create_task(self._run_refresh())
                self._in_flight = task
            else:
                log.debug("Joining in-flight token refresh")

        await asyncio.shield(task)
        return True

    async def _run_refresh(self) -> str:
        try:
            token = await self._refresh()
            async with self._lock:
                self._token = token
            return token
        finally:
            async with self._lock:
                self._in_flight = None


__all__ = ["RefreshingBearerAuthenticator"]
