"""Port for the network transport."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sturdy.core.http import HTTPRequest, HTTPResponse, StreamedResponse


@runtime_checkable
class Transport(Protocol):
    """Performs one HTTP exchange.

    Implementations raise :class:`sturdy.core.errors.TransportError` when no
    response could be obtained, with a category the retry policy can judge.
    """

    async def perform(self, request: HTTPRequest) -> HTTPResponse: ...

    async def open_stream(self, request: HTTPRequest) -> StreamedResponse: ...

    async def aclose(self) -> None: ...


__all__ = ["Transport"]
