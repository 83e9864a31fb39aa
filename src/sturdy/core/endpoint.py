"""Declarative endpoint descriptors and per-call cache directives."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .body import NoBody, RequestBody
from .errors import ParseFailureError
from .headers import HTTPHeaders
from .http import HTTPMethod, frozen_headers

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from .http import HTTPResponse
    from .ports.codec import Codec


class CacheMode(StrEnum):
    DISABLED = "disabled"
    PROTOCOL = "protocol"
    MANUAL = "manual"


@dataclass(slots=True, frozen=True)
class CacheDirective:
    """Per-endpoint caching choice; ``mode=None`` inherits the client default."""

    mode: CacheMode | None = None
    ttl: float | None = None

    @classmethod
    def inherit(cls) -> CacheDirective:
        return cls()

    @classmethod
    def disabled(cls) -> CacheDirective:
        return cls(mode=CacheMode.DISABLED)

    @classmethod
    def protocol(cls) -> CacheDirective:
        return cls(mode=CacheMode.PROTOCOL)

    @classmethod
    def manual(cls, ttl: float) -> CacheDirective:
        return cls(mode=CacheMode.MANUAL, ttl=ttl)

    def resolve(self, default: CacheMode) -> CacheMode:
        return self.mode if self.mode is not None else default


def _no_result(response: HTTPResponse) -> None:
    del response


def _body_bytes(response: HTTPResponse) -> bytes:
    return response.body


@dataclass(slots=True, frozen=True)
class Endpoint[R]:
    method: HTTPMethod
    path: str
    parse: Callable[[HTTPResponse], R]
    query: tuple[tuple[str, str], ...] = ()
    headers: HTTPHeaders = field(default_factory=HTTPHeaders)
    body: RequestBody = field(default_factory=NoBody)
    timeout: float | None = None
    accepts: frozenset[int] | None = None
    cache: CacheDirective | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "query", tuple((str(k), str(v)) for k, v in self.query))
        object.__setattr__(self, "headers", frozen_headers(self.headers))
        if self.accepts is not None:
            object.__setattr__(self, "accepts", frozenset(self.accepts))

    @classmethod
    def empty(
        cls,
        method: HTTPMethod | str,
        path: str,
        *,
        query: Iterable[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
        body: RequestBody | None = None,
        timeout: float | None = None,
        accepts: Iterable[int] | None = None,
        cache: CacheDirective | None = None,
    ) -> Endpoint[None]:
        return Endpoint(
            method=HTTPMethod(method),
            path=path,
            parse=_no_result,
            query=tuple(query),
            headers=HTTPHeaders(headers),
            body=body or NoBody(),
            timeout=timeout,
            accepts=frozenset(accepts) if accepts is not None else None,
            cache=cache,
        )

    @classmethod
    def data(
        cls,
        method: HTTPMethod | str,
        path: str,
        *,
        query: Iterable[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
        body: RequestBody | None = None,
        timeout: float | None = None,
        accepts: Iterable[int] | None = None,
        cache: CacheDirective | None = None,
    ) -> Endpoint[bytes]:
        return Endpoint(
            method=HTTPMethod(method),
            path=path,
            parse=_body_bytes,
            query=tuple(query),
            headers=HTTPHeaders(headers),
            body=body or NoBody(),
            timeout=timeout,
            accepts=frozenset(accepts) if accepts is not None else None,
            cache=cache,
        )

    @classmethod
    def json[T](
        cls,
        target: type[T],
        method: HTTPMethod | str,
        path: str,
        *,
        query: Iterable[tuple[str, str]] = (),
        headers: Mapping[str, str] | None = None,
        body: RequestBody | None = None,
        timeout: float | None = None,
        accepts: Iterable[int] | None = None,
        cache: CacheDirective | None = None,
        codec: Codec | None = None,
    ) -> Endpoint[T]:
        if codec is None:
            from sturdy.adapters.codec import PydanticJSONCodec

            codec = PydanticJSONCodec()
        return Endpoint(
            method=HTTPMethod(method),
            path=path,
            parse=decode_parser(target, codec),
            query=tuple(query),
            headers=HTTPHeaders(headers),
            body=body or NoBody(),
            timeout=timeout,
            accepts=frozenset(accepts) if accepts is not None else None,
            cache=cache,
        )


def decode_parser[T](target: type[T], codec: Codec) -> Callable[[HTTPResponse], T]:
    """Build a parser that decodes the body into ``target`` via ``codec``."""

    def parse(response: HTTPResponse) -> T:
        try:
            return codec.decode(response.body, target)
        except Exception as exc:
            raise ParseFailureError(exc) from exc

    return parse


__all__ = ["CacheDirective", "CacheMode", "Endpoint", "decode_parser"]
