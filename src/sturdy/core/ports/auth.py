"""Ports for request authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sturdy.core.http import HTTPRequest


@runtime_checkable
class Authenticator(Protocol):
    async def authenticate(self, request: HTTPRequest) -> HTTPRequest: ...


@runtime_checkable
class RefreshingAuthenticator(Authenticator, Protocol):
    async def attempt_refresh(self, status_code: int, body: bytes | None = None) -> bool:
        """Refresh credentials after an authorization failure.

        Returns ``True`` when new credentials are in place and the request is
        worth sending again.
        """
        ...


class NoAuth:
    async def authenticate(self, request: HTTPRequest) -> HTTPRequest:
        return request

    def __repr__(self) -> str:
        return "NoAuth()"


__all__ = ["Authenticator", "NoAuth", "RefreshingAuthenticator"]
