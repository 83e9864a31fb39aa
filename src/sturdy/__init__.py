from __future__ import annotations

from importlib import metadata

from sturdy.adapters.auth import (
    APIKeyHeaderAuthenticator,
    APIKeyQueryAuthenticator,
    BasicAuthenticator,
    BearerTokenAuthenticator,
    CompositeAuthenticator,
    HMACAuthenticator,
)
from sturdy.adapters.codec import PydanticJSONCodec
from sturdy.adapters.http_resilience import ResilientClient, with_resilience
from sturdy.adapters.httpx_transport import HttpxTransport
from sturdy.adapters.memory_cache import MemoryResponseCache
from sturdy.adapters.network_logger import LoggingNetworkLogger
from sturdy.adapters.oauth import RefreshingBearerAuthenticator
from sturdy.cancellation import CancellationToken
from sturdy.config.http_resilience import (
    CachingConfig,
    ProtocolCacheConfig,
    RateLimit,
    ResilienceConfig,
)
from sturdy.core import (
    Backoff,
    CacheDirective,
    CacheMode,
    Endpoint,
    FormBody,
    HTTPHeaders,
    HTTPMethod,
    HTTPRequest,
    HTTPResponse,
    Jitter,
    JSONBody,
    NetworkError,
    NoBody,
    RawBody,
    RetryPolicy,
)

try:
    __version__ = metadata.version("sturdy")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    "APIKeyHeaderAuthenticator",
    "APIKeyQueryAuthenticator",
    "Backoff",
    "BasicAuthenticator",
    "BearerTokenAuthenticator",
    "CacheDirective",
    "CacheMode",
    "CachingConfig",
    "CancellationToken",
    "CompositeAuthenticator",
    "Endpoint",
    "FormBody",
    "HMACAuthenticator",
    "HTTPHeaders",
    "HTTPMethod",
    "HTTPRequest",
    "HTTPResponse",
    "HttpxTransport",
    "JSONBody",
    "Jitter",
    "LoggingNetworkLogger",
    "MemoryResponseCache",
    "NetworkError",
    "NoBody",
    "ProtocolCacheConfig",
    "PydanticJSONCodec",
    "RateLimit",
    "RawBody",
    "RefreshingBearerAuthenticator",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "with_resilience",
]
