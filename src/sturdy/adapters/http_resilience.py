"""Request execution engine: retries, auth refresh, manual caching, parsing."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Concatenate, Protocol

import httpx
from aiolimiter import AsyncLimiter

from sturdy.cancellation import until_cancelled
from sturdy.core.body import NoBody, RequestBody
from sturdy.core.endpoint import CacheMode, Endpoint
from sturdy.core.errors import (
    InvalidURLError,
    NetworkError,
    NonHTTPResponseError,
    ParseFailureError,
    RequestCancelledError,
    RequestTimedOutError,
    RetriesExhaustedError,
    TransportError,
    TransportErrorCategory,
    UnacceptableStatusError,
)
from sturdy.core.headers import HTTPHeaders
from sturdy.core.http import HTTPMethod, HTTPRequest, HTTPResponse, StreamedResponse
from sturdy.core.ports.auth import RefreshingAuthenticator
from sturdy.core.ports.cache import CacheKey, ResponseCache

from .httpx_transport import HttpxTransport
from .memory_cache import MemoryResponseCache

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterable, Mapping, Sequence
    from types import TracebackType

    from sturdy.cancellation import CancellationToken
    from sturdy.config.http_resilience import ResilienceConfig
    from sturdy.core.endpoint import CacheDirective
    from sturdy.core.ports.transport import Transport

log = getLogger(__name__)

UNAUTHORIZED = 401


class _HasStatus(Protocol):
    @property
    def status_code(self) -> int: ...


def _join_paths(base: str, path: str) -> str:
    if not path:
        return base
    joined = base.rstrip("/")
    if not path.startswith("/"):
        joined += "/"
    return joined + path


def compose_url(
    base_url: str | None,
    path: str,
    query: Sequence[tuple[str, str]] = (),
) -> httpx.URL:
    """Append ``path`` to the base URL's path and ``query`` to its query string.

    Existing query parameters are kept; pairs are appended in order and
    duplicates are preserved.
    """
    try:
        relative = httpx.URL(path)
        if base_url is None:
            url = relative
            params = [*relative.params.multi_items(), *query]
        else:
            base = httpx.URL(base_url)
            url = base.copy_with(path=_join_paths(base.path, relative.path))
            params = [*base.params.multi_items(), *relative.params.multi_items(), *query]
        if params:
            url = url.copy_with(params=httpx.QueryParams(params))
    except httpx.InvalidURL as exc:
        raise InvalidURLError(f"{base_url or ''}{path}") from exc

    if url.scheme not in {"http", "https"} or not url.host:
        raise InvalidURLError(str(url))
    return url


class ResilientClient:
    """HTTP client that retries, refreshes credentials and caches on its own.

    All policy comes from a frozen :class:`ResilienceConfig`; the only mutable
    state shared between concurrent calls is the manual response cache and
    whatever the configured authenticator keeps.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: Transport | None = None,
    ) -> None:
        self.config = config
        self._transport: Transport = transport or HttpxTransport(
            protocol_cache=config.caching.protocol
        )
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )
        self._cache: ResponseCache = (
            config.caching.cache
            if config.caching.cache is not None
            else MemoryResponseCache(max_entries=config.caching.max_entries)
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # -- request construction -------------------------------------------------

    def build_request[R](self, endpoint: Endpoint[R]) -> HTTPRequest:
        url = compose_url(self.config.base_url, endpoint.path, endpoint.query)

        headers = HTTPHeaders(self.config.default_headers)
        headers.merge(endpoint.headers)

        content, content_type = endpoint.body.render()
        if content_type is not None:
            headers["Content-Type"] = content_type

        mode = self._resolve_cache_mode(endpoint.cache)
        return HTTPRequest(
            method=endpoint.method,
            url=url,
            headers=headers,
            body=content,
            timeout=(
                endpoint.timeout if endpoint.timeout is not None else self.config.timeout_seconds
            ),
            protocol_cache=mode is CacheMode.PROTOCOL,
        )

    def _resolve_cache_mode(self, directive: CacheDirective | None) -> CacheMode:
        default = self.config.caching.mode
        return directive.resolve(default) if directive is not None else default

    def _manual_cache_ttl(self, directive: CacheDirective | None) -> float | None:
        if self._resolve_cache_mode(directive) is not CacheMode.MANUAL:
            return None
        if directive is not None and directive.ttl is not None:
            return directive.ttl
        return self.config.caching.default_ttl_seconds

    # -- typed calls ----------------------------------------------------------

    async def send[R](
        self,
        endpoint: Endpoint[R],
        *,
        cancel: CancellationToken | None = None,
    ) -> R:
        """Execute ``endpoint`` and return its parsed result."""
        if cancel is not None:
            cancel.raise_if_cancelled()

        request = self.build_request(endpoint)
        accepts = endpoint.accepts if endpoint.accepts is not None else self.config.accepts

        cache_key: CacheKey | None = None
        ttl = self._manual_cache_ttl(endpoint.cache)
        if ttl is not None and request.method.is_idempotent:
            cache_key = CacheKey.from_request(request)
            cached = await self._cache.get(cache_key)
            if cached is not None:
                if accepts is None or cached.status_code in accepts:
                    log.debug(f"Serving {request.method} {request.url} from cache")
                    self.config.logger.log_response(
                        cached.status_code, cached.url, len(cached.body)
                    )
                    return _parse(endpoint, cached)
                log.debug(
                    f"Ignoring cached {cached.status_code} for {request.url}: status not accepted"
                )

        response = await self.send_raw(request, cancel=cancel)

        if accepts is not None and response.status_code not in accepts:
            raise UnacceptableStatusError(response.status_code, response.body)

        result = _parse(endpoint, response)

        if cache_key is not None and ttl is not None and ttl > 0:
            await self._cache.set(response, cache_key, ttl)
        return result

    async def request(
        self,
        method: HTTPMethod | str,
        path: str,
        *,
        query: Iterable[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
        body: RequestBody | None = None,
        timeout: float | None = None,
        cache: CacheDirective | None = None,
        cancel: CancellationToken | None = None,
    ) -> HTTPResponse:
        endpoint = Endpoint(
            method=HTTPMethod(method),
            path=path,
            parse=_identity,
            query=tuple(query),
            headers=HTTPHeaders(headers),
            body=body or NoBody(),
            timeout=timeout,
            cache=cache,
        )
        return await self.send(endpoint, cancel=cancel)

    async def get(
        self,
        path: str,
        *,
        query: Iterable[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
        cache: CacheDirective | None = None,
        cancel: CancellationToken | None = None,
    ) -> HTTPResponse:
        return await self.request(
            HTTPMethod.GET, path, query=query, headers=headers, cache=cache, cancel=cancel
        )

    async def post(
        self,
        path: str,
        *,
        body: RequestBody | None = None,
        query: Iterable[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
        cancel: CancellationToken | None = None,
    ) -> HTTPResponse:
        return await self.request(
            HTTPMethod.POST, path, body=body, query=query, headers=headers, cancel=cancel
        )

    # -- raw and streaming calls ----------------------------------------------

    async def send_raw(
        self,
        request: HTTPRequest,
        *,
        cancel: CancellationToken | None = None,
    ) -> HTTPResponse:
        """Send a prepared request through the retry loop, without parsing or caching."""
        return await self._execute(
            request,
            cancel=cancel,
            perform=self._transport.perform,
            release=_keep,
            body_size=_body_size,
        )

    @asynccontextmanager
    async def stream(
        self,
        request: HTTPRequest,
        *,
        cancel: CancellationToken | None = None,
    ) -> AsyncIterator[StreamedResponse]:
        """Open a byte stream for ``request``; caching and parsing are bypassed."""
        streamed = await self._execute(
            request,
            cancel=cancel,
            perform=self._transport.open_stream,
            release=_close_stream,
            body_size=_no_body_size,
        )
        try:
            yield streamed
        finally:
            await streamed.aclose()

    async def _execute[T: _HasStatus](
        self,
        request: HTTPRequest,
        *,
        cancel: CancellationToken | None,
        perform: Callable[[HTTPRequest], Awaitable[T]],
        release: Callable[[T], Awaitable[None]],
        body_size: Callable[[T], int],
    ) -> T:
        retry = self.config.retry
        authenticator = self.config.authenticator
        attempt = 0
        refresh_attempted = False

        while True:
            if cancel is not None:
                cancel.raise_if_cancelled()

            prepared = await authenticator.authenticate(request)
            self.config.logger.log_request(prepared)
            try:
                response = await until_cancelled(
                    self._send(perform, prepared), cancel, discard=release
                )
            except TransportError as exc:
                if exc.category is TransportErrorCategory.CANCELLED:
                    raise RequestCancelledError from exc
                if retry.should_retry(error=exc, attempt=attempt):
                    attempt += 1
                    log.warning(
                        f"{request.method} {request.url} failed ({exc.category}); "
                        f"retry {attempt}/{retry.max_retries}"
                    )
                    await self._pause(attempt, cancel)
                    continue
                failure = self._terminal_failure(exc, attempt)
                if failure is exc:
                    raise
                raise failure from exc

            status = response.status_code
            if not 100 <= status <= 599:
                await release(response)
                raise NonHTTPResponseError(f"Invalid HTTP status code {status}")
            self.config.logger.log_response(status, prepared.url, body_size(response))

            if (
                status == UNAUTHORIZED
                and not refresh_attempted
                and isinstance(authenticator, RefreshingAuthenticator)
            ):
                refresh_attempted = True
                body = response.body if isinstance(response, HTTPResponse) else None
                try:
                    refreshed = await authenticator.attempt_refresh(status, body)
                except BaseException:
                    await release(response)
                    raise
                if refreshed:
                    log.debug(f"Credentials refreshed; resending {request.method} {request.url}")
                    await release(response)
                    continue

            if retry.should_retry(status_code=status, attempt=attempt):
                await release(response)
                attempt += 1
                log.warning(
                    f"{request.method} {request.url} returned {status}; "
                    f"retry {attempt}/{retry.max_retries}"
                )
                await self._pause(attempt, cancel)
                continue

            return response

    async def _send[T](
        self,
        perform: Callable[[HTTPRequest], Awaitable[T]],
        request: HTTPRequest,
    ) -> T:
        if self._limiter is None:
            return await perform(request)
        async with self._limiter:
            return await perform(request)

    async def _pause(self, attempt: int, cancel: CancellationToken | None) -> None:
        delay = self.config.retry.backoff.delay(attempt)
        await until_cancelled(self.config.sleeper.sleep(delay), cancel)

    def _terminal_failure(self, exc: TransportError, attempt: int) -> NetworkError:
        if attempt > 0 and self.config.retry.is_retriable_error(exc):
            return RetriesExhaustedError(last_error=exc)
        if exc.category is TransportErrorCategory.TIMEOUT:
            return RequestTimedOutError()
        return exc


def _parse[R](endpoint: Endpoint[R], response: HTTPResponse) -> R:
    try:
        return endpoint.parse(response)
    except ParseFailureError:
        raise
    except Exception as exc:
        raise ParseFailureError(exc) from exc


def _identity(response: HTTPResponse) -> HTTPResponse:
    return response


async def _keep(response: HTTPResponse) -> None:
    del response


async def _close_stream(response: StreamedResponse) -> None:
    await response.aclose()


def _body_size(response: HTTPResponse) -> int:
    return len(response.body)


def _no_body_size(response: StreamedResponse) -> int:
    del response
    return 0


def with_resilience[**P, T](
    config: ResilienceConfig,
    *,
    transport_factory: Callable[[], Transport] | None = None,
) -> Callable[
    [Callable[Concatenate[ResilientClient, P], Awaitable[T]]],
    Callable[P, Awaitable[T]],
]:
    """Run the decorated coroutine with a fresh client that is closed afterwards."""

    def decorator(
        func: Callable[Concatenate[ResilientClient, P], Awaitable[T]],
    ) -> Callable[P, Awaitable[T]]:
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            transport = transport_factory() if transport_factory is not None else None
            async with ResilientClient(config, transport=transport) as client:
                return await func(client, *args, **kwargs)

        return wrapper

    return decorator


__all__ = ["ResilientClient", "compose_url", "with_resilience"]
