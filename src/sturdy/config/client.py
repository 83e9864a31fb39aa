"""Environment-driven client configuration."""

from __future__ import annotations

from dataclasses import replace

from sturdy.adapters.auth import BearerTokenAuthenticator
from sturdy.core.endpoint import CacheMode
from sturdy.core.retry import RetryPolicy

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CachingConfig, ResilienceConfig


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(value)
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError(value)
    return number


def get_resilience_config(*, name: str = "default") -> ResilienceConfig:
    """Build a client configuration from ``STURDY_*`` environment variables.

    ``STURDY_BASE_URL`` is required; timeout, retry budget, cache mode, cache
    TTL and an optional static bearer token fall back to library defaults.
    """

    base_url = require_env_vars(("STURDY_BASE_URL",))["STURDY_BASE_URL"]
    if not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"STURDY_BASE_URL must be an http(s) URL: {base_url!r}")
    config = ResilienceConfig(name=name, base_url=base_url)

    timeout = optional_env_var("STURDY_TIMEOUT_SECONDS", _positive_float)
    if timeout is not None:
        config = replace(config, timeout_seconds=timeout)

    max_retries = optional_env_var("STURDY_MAX_RETRIES", _non_negative_int)
    if max_retries is not None:
        config = replace(config, retry=RetryPolicy(max_retries=max_retries))

    mode = optional_env_var("STURDY_CACHE_MODE", CacheMode)
    ttl = optional_env_var("STURDY_CACHE_TTL_SECONDS", _positive_float)
    if mode is not None or ttl is not None:
        caching = CachingConfig()
        if mode is not None:
            caching = replace(caching, mode=mode)
        if ttl is not None:
            caching = replace(caching, default_ttl_seconds=ttl)
        config = replace(config, caching=caching)

    token = optional_env_var("STURDY_BEARER_TOKEN", str)
    if token is not None:
        config = replace(config, authenticator=BearerTokenAuthenticator(token))

    return config
