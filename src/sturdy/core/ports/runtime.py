"""Ports for sleeping and request/response logging."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import httpx

    from sturdy.core.http import HTTPRequest


@runtime_checkable
class Sleeper(Protocol):
    async def sleep(self, seconds: float) -> None: ...


@runtime_checkable
class NetworkLogger(Protocol):
    def log_request(self, request: HTTPRequest) -> None: ...

    def log_response(self, status_code: int, url: httpx.URL | None, body_size: int) -> None: ...


class AsyncioSleeper:
    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def __repr__(self) -> str:
        return "AsyncioSleeper()"


class NoOpLogger:
    def log_request(self, request: HTTPRequest) -> None:
        del request

    def log_response(self, status_code: int, url: httpx.URL | None, body_size: int) -> None:
        del status_code, url, body_size

    def __repr__(self) -> str:
        return "NoOpLogger()"


__all__ = ["AsyncioSleeper", "NetworkLogger", "NoOpLogger", "Sleeper"]
