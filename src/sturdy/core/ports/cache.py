"""Port for the manual response cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sturdy.core.http import HTTPRequest, HTTPResponse


@dataclass(frozen=True, slots=True)
class CacheKey:
    method: str
    url: str

    @classmethod
    def from_request(cls, request: HTTPRequest) -> CacheKey:
        return cls(method=str(request.method), url=str(request.url))


@runtime_checkable
class ResponseCache(Protocol):
    async def get(self, key: CacheKey) -> HTTPResponse | None: ...

    async def set(self, response: HTTPResponse, key: CacheKey, ttl: float) -> None: ...

    async def remove(self, key: CacheKey) -> None: ...

    async def remove_all(self) -> None: ...


__all__ = ["CacheKey", "ResponseCache"]
