"""Ports the execution engine consumes from its host environment."""

from __future__ import annotations

from .auth import Authenticator, NoAuth, RefreshingAuthenticator
from .cache import CacheKey, ResponseCache
from .codec import Codec
from .runtime import AsyncioSleeper, NetworkLogger, NoOpLogger, Sleeper
from .transport import Transport

__all__ = [
    "AsyncioSleeper",
    "Authenticator",
    "CacheKey",
    "Codec",
    "NetworkLogger",
    "NoAuth",
    "NoOpLogger",
    "RefreshingAuthenticator",
    "ResponseCache",
    "Sleeper",
    "Transport",
]
