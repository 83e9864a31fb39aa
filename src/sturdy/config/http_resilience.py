"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from sturdy.core.endpoint import CacheMode
from sturdy.core.ports.auth import Authenticator, NoAuth
from sturdy.core.ports.cache import ResponseCache
from sturdy.core.ports.runtime import AsyncioSleeper, NetworkLogger, NoOpLogger, Sleeper
from sturdy.core.retry import Backoff, Jitter, RetryPolicy

DEFAULT_HEADERS: Mapping[str, str] = {"accept": "application/json"}


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ProtocolCacheConfig:
    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class CachingConfig:
    """Client-wide caching defaults.

    ``mode`` applies to endpoints whose directive is missing or ``inherit``.
    ``cache`` is the manual response cache; when omitted the client creates an
    in-memory one holding at most ``max_entries`` responses.
    """

    mode: CacheMode = CacheMode.DISABLED
    cache: ResponseCache | None = None
    default_ttl_seconds: float = 300.0
    max_entries: int = 256
    protocol: ProtocolCacheConfig | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))
    timeout_seconds: float = 30.0
    accepts: frozenset[int] | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    caching: CachingConfig = field(default_factory=CachingConfig)
    authenticator: Authenticator = field(default_factory=NoAuth)
    logger: NetworkLogger = field(default_factory=NoOpLogger)
    sleeper: Sleeper = field(default_factory=AsyncioSleeper)


__all__ = [
    "DEFAULT_HEADERS",
    "Backoff",
    "CachingConfig",
    "Jitter",
    "ProtocolCacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
]
