"""httpx-backed transport, with optional hishel protocol caching."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient

from sturdy.config.storage import http_cache_path
from sturdy.core.errors import (
    InvalidURLError,
    NetworkError,
    NonHTTPResponseError,
    TransportError,
    TransportErrorCategory,
)
from sturdy.core.headers import HTTPHeaders
from sturdy.core.http import HTTPResponse, StreamedResponse

if TYPE_CHECKING:
    from sturdy.config.http_resilience import ProtocolCacheConfig
    from sturdy.core.http import HTTPRequest

log = getLogger(__name__)

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "no address associated",
)


def _connect_category(exc: httpx.ConnectError) -> TransportErrorCategory:
    message = str(exc).lower()
    if any(marker in message for marker in _DNS_MARKERS):
        return TransportErrorCategory.DNS_FAILURE
    if "network is unreachable" in message:
        return TransportErrorCategory.NOT_CONNECTED
    return TransportErrorCategory.CANNOT_CONNECT


def translate_httpx_error(exc: httpx.HTTPError) -> NetworkError:
    """Map an httpx failure onto the engine's error taxonomy."""
    match exc:
        case httpx.TimeoutException():
            category = TransportErrorCategory.TIMEOUT
        case httpx.ConnectError():
            category = _connect_category(exc)
        case httpx.UnsupportedProtocol():
            return NonHTTPResponseError(str(exc))
        case (
            httpx.ReadError()
            | httpx.WriteError()
            | httpx.CloseError()
            | httpx.RemoteProtocolError()
        ):
            category = TransportErrorCategory.CONNECTION_LOST
        case _:
            category = TransportErrorCategory.OTHER
    return TransportError(str(exc) or type(exc).__name__, category=category)


def _headers_from(source: httpx.Headers) -> HTTPHeaders:
    headers = HTTPHeaders()
    for name, value in source.multi_items():
        headers.add(name, value)
    return headers


def _build_cache_client(config: ProtocolCacheConfig) -> AsyncCacheClient:
    if config.backend not in {"sqlite", "memory"}:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)

    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(http_cache_path())
    else:
        database_path = ":memory:"
    storage = AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )
    return AsyncCacheClient(storage=storage, follow_redirects=True)


class HttpxTransport:
    """Sends requests through ``httpx.AsyncClient``.

    Requests flagged with ``protocol_cache`` go through a hishel
    ``AsyncCacheClient`` when one is configured, otherwise through the plain
    client.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        protocol_cache: ProtocolCacheConfig | None = None,
        cache_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        if cache_client is None and protocol_cache is not None and protocol_cache.enabled:
            cache_client = _build_cache_client(protocol_cache)
        self._cache_client = cache_client

    def _client_for(self, request: HTTPRequest) -> httpx.AsyncClient:
        if request.protocol_cache and self._cache_client is not None:
            return self._cache_client
        return self._client

    def _build(self, client: httpx.AsyncClient, request: HTTPRequest) -> httpx.Request:
        try:
            return client.build_request(
                str(request.method),
                request.url,
                headers=request.headers.as_dict(),
                content=request.body,
                timeout=(
                    request.timeout if request.timeout is not None else httpx.USE_CLIENT_DEFAULT
                ),
            )
        except httpx.InvalidURL as exc:
            raise InvalidURLError(str(request.url)) from exc

    async def perform(self, request: HTTPRequest) -> HTTPResponse:
        client = self._client_for(request)
        http_request = self._build(client, request)
        try:
            response = await client.send(http_request)
        except httpx.HTTPError as exc:
            raise translate_httpx_error(exc) from exc
        return HTTPResponse(
            status_code=response.status_code,
            headers=_headers_from(response.headers),
            body=response.content,
            url=response.url,
        )

    async def open_stream(self, request: HTTPRequest) -> StreamedResponse:
        http_request = self._build(self._client, request)
        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.HTTPError as exc:
            raise translate_httpx_error(exc) from exc
        return StreamedResponse(
            status_code=response.status_code,
            headers=_headers_from(response.headers),
            url=response.url,
            chunks=response.aiter_bytes(),
            closer=response.aclose,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
        if self._cache_client is not None:
            await self._cache_client.aclose()


__all__ = ["HttpxTransport", "translate_httpx_error"]
