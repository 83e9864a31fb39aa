from __future__ import annotations

import asyncio

import httpx
import pytest

from sturdy.adapters.oauth import RefreshingBearerAuthenticator
from sturdy.core.http import HTTPMethod, HTTPRequest
from sturdy.core.ports.auth import RefreshingAuthenticator


class CountingRefresh:
    def __init__(self, *tokens: str, error: Exception | None = None) -> None:
        self._tokens = list(tokens)
        self._error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        await asyncio.sleep(0.01)
        if self._error is not None:
            raise self._error
        return self._tokens.pop(0)


def test_is_a_refreshing_authenticator() -> None:
    authenticator = RefreshingBearerAuthenticator("old", CountingRefresh("new"))

    assert isinstance(authenticator, RefreshingAuthenticator)


def test_authenticate_uses_current_token() -> None:
    authenticator = RefreshingBearerAuthenticator("old", CountingRefresh("new"))
    request = HTTPRequest(method=HTTPMethod.GET, url=httpx.URL("https://api.example.com/me"))

    async def scenario() -> tuple[str, str]:
        before = await authenticator.authenticate(request)
        await authenticator.attempt_refresh(401)
        after = await authenticator.authenticate(request)
        return before.headers["authorization"], after.headers["authorization"]

    assert asyncio.run(scenario()) == ("Bearer old", "Bearer new")


def test_non_401_status_does_not_refresh() -> None:
    refresh = CountingRefresh("new")
    authenticator = RefreshingBearerAuthenticator("old", refresh)

    assert asyncio.run(authenticator.attempt_refresh(403)) is False
    assert refresh.calls == 0
    assert authenticator.token == "old"


def test_concurrent_refreshes_share_one_call() -> None:
    refresh = CountingRefresh("new")
    authenticator = RefreshingBearerAuthenticator("old", refresh)

    async def scenario() -> list[bool]:
        return await asyncio.gather(*(authenticator.attempt_refresh(401) for _ in range(5)))

    assert asyncio.run(scenario()) == [True] * 5
    assert refresh.calls == 1
    assert authenticator.token == "new"


def test_sequential_refreshes_each_run() -> None:
    refresh = CountingRefresh("second", "third")
    authenticator = RefreshingBearerAuthenticator("first", refresh)

    async def scenario() -> None:
        await authenticator.attempt_refresh(401)
        await authenticator.attempt_refresh(401)

    asyncio.run(scenario())

    assert refresh.calls == 2
    assert authenticator.token == "third"


def test_failed_refresh_propagates_to_every_waiter_and_keeps_token() -> None:
    refresh = CountingRefresh(error=RuntimeError("refresh denied"))
    authenticator = RefreshingBearerAuthenticator("old", refresh)

    async def scenario() -> list[BaseException | bool]:
        return await asyncio.gather(
            *(authenticator.attempt_refresh(401) for _ in range(3)),
            return_exceptions=True,
        )

    results = asyncio.run(scenario())

    assert all(isinstance(result, RuntimeError) for result in results)
    assert refresh.calls == 1
    assert authenticator.token == "old"


def test_slot_is_cleared_after_failure() -> None:
    outcomes: list[str | Exception] = [RuntimeError("first"), "recovered"]

    async def refresh() -> str:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    authenticator = RefreshingBearerAuthenticator("old", refresh)

    async def scenario() -> bool:
        with pytest.raises(RuntimeError):
            await authenticator.attempt_refresh(401)
        return await authenticator.attempt_refresh(401)

    assert asyncio.run(scenario()) is True
    assert authenticator.token == "recovered"
