"""Static-credential authenticators."""

from __future__ import annotations

import base64
import hashlib
import hmac
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sturdy.core.http import HTTPRequest
    from sturdy.core.ports.auth import Authenticator

ValueProvider = Callable[[], Awaitable[str]]


def _constant(value: str) -> ValueProvider:
    async def provide() -> str:
        return value

    return provide


class BasicAuthenticator:
    def __init__(self, username: str, password: str) -> None:
        self.username = username
        self.password = password

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        credentials = f"{self.username}:{self.password}".encode()
        token = base64.b64encode(credentials).decode("ascii")
        return request.with_header("Authorization", f"Basic {token}")


class BearerTokenAuthenticator:
    """Sends ``Authorization: Bearer <token>`` from a fixed token or an async provider."""

    def __init__(
        self,
        token: str | None = None,
        *,
        token_provider: ValueProvider | None = None,
    ) -> None:
        if (token is None) == (token_provider is None):
            raise ValueError("Pass exactly one of token or token_provider")
        self._provider = token_provider or _constant(token or "")

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        token = await self._provider()
        return request.with_header("Authorization", f"Bearer {token}")


class APIKeyHeaderAuthenticator:
    def __init__(
        self,
        header: str,
        value: str | None = None,
        *,
        value_provider: ValueProvider | None = None,
    ) -> None:
        if (value is None) == (value_provider is None):
            raise ValueError("Pass exactly one of value or value_provider")
        self.header = header
        self._provider = value_provider or _constant(value or "")

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        return request.with_header(self.header, await self._provider())


class APIKeyQueryAuthenticator:
    """Appends the key as a query parameter, keeping any existing parameters."""

    def __init__(
        self,
        name: str,
        value: str | None = None,
        *,
        value_provider: ValueProvider | None = None,
    ) -> None:
        if (value is None) == (value_provider is None):
            raise ValueError("Pass exactly one of value or value_provider")
        self.name = name
        self._provider = value_provider or _constant(value or "")

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        return request.with_query_param(self.name, await self._provider())


class CompositeAuthenticator:
    """Applies authenticators in order; each sees the previous one's output."""

    def __init__(self, authenticators: Sequence[Authenticator]) -> None:
        self._authenticators = tuple(authenticators)

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        for authenticator in self._authenticators:
            request = await authenticator.authenticate(request)
        return request


class HMACHash(StrEnum):
    SHA256 = "sha256"
    SHA512 = "sha512"


def default_signing_message(request: HTTPRequest) -> bytes:
    """``METHOD\\nURL\\nBODY``; override when the server signs something else."""
    parts = (str(request.method).encode(), str(request.url).encode(), request.body or b"")
    return b"\n".join(parts)


class HMACAuthenticator:
    """Signs each request and sends the base64 signature in a header."""

    def __init__(
        self,
        key: bytes,
        *,
        header: str = "X-Signature",
        hash_name: HMACHash = HMACHash.SHA256,
        message: Callable[[HTTPRequest], bytes] = default_signing_message,
    ) -> None:
        self._key = key
        self.header = header
        self.hash_name = HMACHash(hash_name)
        self._message = message

    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        digest = hmac.new(self._key, self._message(request), getattr(hashlib, self.hash_name))
        signature = base64.b64encode(digest.digest()).decode("ascii")
        return request.with_header(self.header, signature)


__all__ = [
    "APIKeyHeaderAuthenticator",
    "APIKeyQueryAuthenticator",
    "BasicAuthenticator",
    "BearerTokenAuthenticator",
    "CompositeAuthenticator",
    "HMACAuthenticator",
    "HMACHash",
    "default_signing_message",
]
