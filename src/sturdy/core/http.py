"""Wire-level request and response values."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

import httpx

from .headers import HTTPHeaders

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Mapping


def frozen_headers(headers: Mapping[str, str]) -> HTTPHeaders:
    if isinstance(headers, HTTPHeaders) and headers.is_frozen:
        return headers
    return HTTPHeaders(headers).freeze()


class HTTPMethod(StrEnum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @classmethod
    def _missing_(cls, value: object) -> HTTPMethod | None:
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return None

    @property
    def is_idempotent(self) -> bool:
        """Whether responses to this method may be served from the manual cache."""
        return self in {HTTPMethod.GET, HTTPMethod.HEAD}


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    method: HTTPMethod
    url: httpx.URL
    headers: HTTPHeaders = field(default_factory=HTTPHeaders)
    body: bytes | None = None
    timeout: float | None = None
    protocol_cache: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", frozen_headers(self.headers))

    def with_header(self, name: str, value: str) -> HTTPRequest:
        headers = self.headers.copy()
        headers[name] = value
        return replace(self, headers=headers)

    def with_query_param(self, name: str, value: str) -> HTTPRequest:
        params = [*self.url.params.multi_items(), (name, value)]
        return replace(self, url=self.url.copy_with(params=httpx.QueryParams(params)))


@dataclass(frozen=True, slots=True)
class HTTPResponse:
    status_code: int
    headers: HTTPHeaders = field(default_factory=HTTPHeaders)
    body: bytes = b""
    url: httpx.URL | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", frozen_headers(self.headers))

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class StreamedResponse:
    """Response head plus an open body stream; close it when done."""

    def __init__(
        self,
        *,
        status_code: int,
        headers: HTTPHeaders,
        url: httpx.URL | None,
        chunks: AsyncIterator[bytes],
        closer: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = frozen_headers(headers)
        self.url = url
        self._chunks = chunks
        self._closer = closer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        async for chunk in self._chunks:
            yield chunk

    async def aread(self) -> bytes:
        return b"".join([chunk async for chunk in self.aiter_bytes()])

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._closer is not None:
            await self._closer()


__all__ = ["HTTPMethod", "HTTPRequest", "HTTPResponse", "StreamedResponse", "frozen_headers"]
