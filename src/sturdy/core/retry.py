"""Retry decisions and exponential backoff."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .errors import TransportError, TransportErrorCategory

if TYPE_CHECKING:
    from collections.abc import Callable


class Jitter(StrEnum):
    NONE = "none"
    FULL = "full"


@dataclass(slots=True, frozen=True)
class Backoff:
    initial: float = 0.2
    multiplier: float = 2.0
    max_delay: float = 8.0
    jitter: Jitter = Jitter.FULL

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_delay", max(0.0, self.max_delay))

    def delay(self, attempt: int, *, random: Callable[[], float] = _random.random) -> float:
        """Seconds to wait before the retry numbered ``attempt`` (1-based)."""
        if attempt <= 0:
            return 0.0
        try:
            growth = self.initial * self.multiplier ** (attempt - 1)
        except OverflowError:
            growth = self.max_delay
        base = min(self.max_delay, growth)
        if self.jitter is Jitter.FULL:
            return base * random()
        return base


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    max_retries: int = 2
    backoff: Backoff = field(default_factory=Backoff)
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_categories: frozenset[TransportErrorCategory] = field(
        default_factory=lambda: frozenset(
            {
                TransportErrorCategory.TIMEOUT,
                TransportErrorCategory.CANNOT_CONNECT,
                TransportErrorCategory.CONNECTION_LOST,
                TransportErrorCategory.DNS_FAILURE,
                TransportErrorCategory.NOT_CONNECTED,
            }
        )
    )
    retry_on_connectivity: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_retries", max(0, self.max_retries))

    def is_retriable_error(self, error: BaseException) -> bool:
        if not isinstance(error, TransportError):
            return False
        category = error.category
        if category.is_connectivity and not self.retry_on_connectivity:
            return False
        return category in self.retry_on_categories

    def should_retry(
        self,
        *,
        attempt: int,
        status_code: int | None = None,
        error: BaseException | None = None,
    ) -> bool:
        if attempt >= self.max_retries:
            return False
        if error is not None:
            return self.is_retriable_error(error)
        if status_code is not None:
            return status_code in self.status_forcelist
        return False


__all__ = ["Backoff", "Jitter", "RetryPolicy"]
