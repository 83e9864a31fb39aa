"""Cooperative per-call cancellation.

A :class:`CancellationToken` is handed to a single client call. The engine
checks it at the top of every attempt and races it against the transport and
the backoff sleep, so a cancelled call stops at the next suspension point and
surfaces :class:`~sturdy.core.errors.RequestCancelledError` once.

Tokens are independent: cancelling one call never touches other calls that
share the same client, cache or authenticator.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING

from sturdy.core.errors import RequestCancelledError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class CancellationToken:
    """Cancellation flag for one logical call.

    Examples:
        >>> token = CancellationToken()
        >>> token.is_cancelled()
        False
        >>> token.cancel()
        >>> token.is_cancelled()
        True
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Signal that the call should stop at its next suspension point."""
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled():
            raise RequestCancelledError


async def until_cancelled[T](
    awaitable: Awaitable[T],
    token: CancellationToken | None,
    *,
    discard: Callable[[T], Awaitable[None]] | None = None,
) -> T:
    """Await ``awaitable`` unless ``token`` fires first.

    When the token wins, the pending work is cancelled and awaited before
    :class:`RequestCancelledError` is raised. A result that lands at the same
    moment is handed to ``discard`` so open resources such as streams get
    released.
    """
    if token is None:
        return await awaitable
    if token.is_cancelled():
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise RequestCancelledError

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if waiter.done():
        work.cancel()
        await asyncio.wait({work})
        if not work.cancelled() and work.exception() is None and discard is not None:
            await discard(work.result())
        raise RequestCancelledError

    waiter.cancel()
    return work.result()


__all__ = ["CancellationToken", "until_cancelled"]
