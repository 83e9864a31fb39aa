"""Scripted transport and runtime fakes for engine tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING

from sturdy.core.http import HTTPRequest, HTTPResponse, StreamedResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

type Step = HTTPResponse | BaseException | Callable[[HTTPRequest], HTTPResponse]


def ok(body: bytes = b"", status_code: int = 200) -> HTTPResponse:
    return HTTPResponse(status_code=status_code, body=body)


class ScriptedTransport:
    """Plays back ``steps`` in order; the last step repeats once the script runs out.

    A step is a response, an exception to raise, or a callable that builds the
    response from the request it receives.
    """

    def __init__(self, *steps: Step) -> None:
        if not steps:
            raise ValueError("ScriptedTransport needs at least one step")
        self._steps = list(steps)
        self.requests: list[HTTPRequest] = []
        self.streams: list[StreamedResponse] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.requests)

    def _next(self, request: HTTPRequest) -> HTTPResponse:
        step = self._steps.pop(0) if len(self._steps) > 1 else self._steps[0]
        if isinstance(step, BaseException):
            raise step
        if callable(step):
            return step(request)
        return step

    async def perform(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        await asyncio.sleep(0)
        response = self._next(request)
        if response.url is None:
            return HTTPResponse(
                status_code=response.status_code,
                headers=response.headers,
                body=response.body,
                url=request.url,
            )
        return response

    async def open_stream(self, request: HTTPRequest) -> StreamedResponse:
        response = await self.perform(request)

        async def chunks() -> AsyncIterator[bytes]:
            body = response.body
            for start in range(0, len(body), 4):
                yield body[start : start + 4]

        async def close() -> None:
            return None

        streamed = StreamedResponse(
            status_code=response.status_code,
            headers=response.headers,
            url=response.url,
            chunks=chunks(),
            closer=close,
        )
        self.streams.append(streamed)
        return streamed

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleeper:
    """Records requested delays instead of sleeping."""

    def __init__(self, on_sleep: Callable[[float], None] | None = None) -> None:
        self.delays: list[float] = []
        self._on_sleep = on_sleep

    async def sleep(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self._on_sleep is not None:
            self._on_sleep(seconds)
        await asyncio.sleep(0)


class RecordingLogger:
    def __init__(self) -> None:
        self.requests: list[HTTPRequest] = []
        self.responses: list[int] = []

    def log_request(self, request: HTTPRequest) -> None:
        self.requests.append(request)

    def log_response(self, status_code: int, url: object, body_size: int) -> None:
        del url, body_size
        self.responses.append(status_code)
