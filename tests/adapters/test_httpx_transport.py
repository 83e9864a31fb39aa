from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from sturdy.adapters.httpx_transport import HttpxTransport, translate_httpx_error
from sturdy.core.errors import (
    NonHTTPResponseError,
    TransportError,
    TransportErrorCategory,
)
from sturdy.core.headers import HTTPHeaders
from sturdy.core.http import HTTPMethod, HTTPRequest

if TYPE_CHECKING:
    from collections.abc import Callable


def _mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(async_handler))


def _request(**overrides: object) -> HTTPRequest:
    fields: dict[str, object] = {
        "method": HTTPMethod.GET,
        "url": httpx.URL("https://api.example.com/items?page=1"),
    }
    fields.update(overrides)
    return HTTPRequest(**fields)  # type: ignore[arg-type]


def test_perform_sends_request_and_reads_response() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            201,
            headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("X-Id", "7")],
            content=b"created",
        )

    transport = HttpxTransport(client=_mock_client(handler))
    request = _request(
        method=HTTPMethod.POST,
        headers=HTTPHeaders({"Content-Type": "text/plain", "X-Trace": "t"}),
        body=b"payload",
        timeout=5.0,
    )

    response = asyncio.run(transport.perform(request))

    assert response.status_code == 201
    assert response.body == b"created"
    assert response.headers["set-cookie"] == "a=1, b=2"
    assert response.headers["x-id"] == "7"
    assert str(response.url) == "https://api.example.com/items?page=1"
    assert seen[0].method == "POST"
    assert seen[0].content == b"payload"
    assert seen[0].headers["x-trace"] == "t"


def test_perform_translates_transport_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    transport = HttpxTransport(client=_mock_client(handler))

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(transport.perform(_request()))

    assert excinfo.value.category is TransportErrorCategory.CANNOT_CONNECT
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_open_stream_yields_body_and_closes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, content=b"streamed bytes")

    transport = HttpxTransport(client=_mock_client(handler))

    async def scenario() -> tuple[bytes, bool]:
        streamed = await transport.open_stream(_request())
        body = await streamed.aread()
        await streamed.aclose()
        return body, streamed.closed

    assert asyncio.run(scenario()) == (b"streamed bytes", True)


def test_protocol_cache_requests_use_cache_client() -> None:
    def plain(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, content=b"plain")

    def cached(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, content=b"cached")

    transport = HttpxTransport(client=_mock_client(plain), cache_client=_mock_client(cached))

    async def scenario() -> tuple[bytes, bytes]:
        regular = await transport.perform(_request())
        via_cache = await transport.perform(_request(protocol_cache=True))
        await transport.aclose()
        return regular.body, via_cache.body

    assert asyncio.run(scenario()) == (b"plain", b"cached")


def test_protocol_cache_flag_without_cache_client_uses_plain_client() -> None:
    def plain(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, content=b"plain")

    transport = HttpxTransport(client=_mock_client(plain))

    response = asyncio.run(transport.perform(_request(protocol_cache=True)))

    assert response.body == b"plain"


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (httpx.ConnectTimeout("slow"), TransportErrorCategory.TIMEOUT),
        (httpx.ReadTimeout("slow"), TransportErrorCategory.TIMEOUT),
        (
            httpx.ConnectError("[Errno -2] Name or service not known"),
            TransportErrorCategory.DNS_FAILURE,
        ),
        (
            httpx.ConnectError("[Errno 101] Network is unreachable"),
            TransportErrorCategory.NOT_CONNECTED,
        ),
        (httpx.ConnectError("refused"), TransportErrorCategory.CANNOT_CONNECT),
        (httpx.ReadError("reset by peer"), TransportErrorCategory.CONNECTION_LOST),
        (httpx.RemoteProtocolError("server hung up"), TransportErrorCategory.CONNECTION_LOST),
        (httpx.ProxyError("proxy said no"), TransportErrorCategory.OTHER),
    ],
)
def test_translate_httpx_error_categories(
    error: httpx.HTTPError, category: TransportErrorCategory
) -> None:
    translated = translate_httpx_error(error)

    assert isinstance(translated, TransportError)
    assert translated.category is category


def test_unsupported_protocol_is_not_an_http_response() -> None:
    translated = translate_httpx_error(httpx.UnsupportedProtocol("ftp"))

    assert isinstance(translated, NonHTTPResponseError)
