"""Transport-independent building blocks of the request execution engine."""

from __future__ import annotations

from .body import FormBody, JSONBody, NoBody, RawBody, RequestBody
from .endpoint import CacheDirective, CacheMode, Endpoint, decode_parser
from .errors import (
    EncodeFailureError,
    InvalidURLError,
    NetworkError,
    NonHTTPResponseError,
    ParseFailureError,
    RequestCancelledError,
    RequestTimedOutError,
    RetriesExhaustedError,
    TransportError,
    TransportErrorCategory,
    UnacceptableStatusError,
)
from .headers import HTTPHeaders
from .http import HTTPMethod, HTTPRequest, HTTPResponse, StreamedResponse
from .retry import Backoff, Jitter, RetryPolicy

__all__ = [
    "Backoff",
    "CacheDirective",
    "CacheMode",
    "EncodeFailureError",
    "Endpoint",
    "FormBody",
    "HTTPHeaders",
    "HTTPMethod",
    "HTTPRequest",
    "HTTPResponse",
    "InvalidURLError",
    "JSONBody",
    "Jitter",
    "NetworkError",
    "NoBody",
    "NonHTTPResponseError",
    "ParseFailureError",
    "RawBody",
    "RequestBody",
    "RequestCancelledError",
    "RequestTimedOutError",
    "RetriesExhaustedError",
    "RetryPolicy",
    "StreamedResponse",
    "TransportError",
    "TransportErrorCategory",
    "UnacceptableStatusError",
    "decode_parser",
]
