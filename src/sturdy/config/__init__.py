"""Application configuration helpers."""

from __future__ import annotations

from .client import get_resilience_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import (
    CachingConfig,
    ProtocolCacheConfig,
    RateLimit,
    ResilienceConfig,
)
from .storage import cache_dir, http_cache_path

__all__ = [
    "CachingConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "ProtocolCacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "cache_dir",
    "get_resilience_config",
    "http_cache_path",
    "optional_env_var",
    "require_env_vars",
]
