"""Error taxonomy raised by the request execution engine."""

from __future__ import annotations

from enum import StrEnum


class NetworkError(RuntimeError):
    """Base class for every error surfaced by a Sturdy client call."""


class InvalidURLError(NetworkError):
    """Raised when a base URL, path and query do not compose into a usable URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url}")
        self.url = url


class NonHTTPResponseError(NetworkError):
    """Raised when the transport hands back something outside HTTP semantics."""

    def __init__(self, message: str = "Response was not an HTTP response") -> None:
        super().__init__(message)


class UnacceptableStatusError(NetworkError):
    """Raised when a response status is outside the accepted status set."""

    def __init__(self, status_code: int, body: bytes | None = None) -> None:
        super().__init__(f"Unacceptable status code: {status_code}")
        self.status_code = status_code
        self.body = body


class ParseFailureError(NetworkError):
    """Raised when an endpoint parser cannot turn a response into its result type."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Decoding failed: {underlying}")
        self.underlying = underlying


class EncodeFailureError(NetworkError):
    """Raised when a request body value cannot be encoded."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Encoding failed: {underlying}")
        self.underlying = underlying


class RequestCancelledError(NetworkError):
    """Raised when a call is cancelled through its cancellation token."""

    def __init__(self) -> None:
        super().__init__("Cancelled")


class RetriesExhaustedError(NetworkError):
    """Raised when a retriable transport failure outlives the retry budget."""

    def __init__(self, last_error: BaseException | None = None) -> None:
        super().__init__(f"All retries failed: {last_error!r}")
        self.last_error = last_error


class RequestTimedOutError(NetworkError):
    """Raised when the transport timed out and no retry was attempted."""

    def __init__(self) -> None:
        super().__init__("Timed out")


class TransportErrorCategory(StrEnum):
    TIMEOUT = "timeout"
    CANNOT_CONNECT = "cannot_connect"
    CONNECTION_LOST = "connection_lost"
    DNS_FAILURE = "dns_failure"
    NOT_CONNECTED = "not_connected"
    CANCELLED = "cancelled"
    OTHER = "other"

    @property
    def is_connectivity(self) -> bool:
        return self in _CONNECTIVITY_CATEGORIES


_CONNECTIVITY_CATEGORIES = frozenset(
    {
        TransportErrorCategory.CANNOT_CONNECT,
        TransportErrorCategory.CONNECTION_LOST,
        TransportErrorCategory.DNS_FAILURE,
        TransportErrorCategory.NOT_CONNECTED,
    }
)


class TransportError(NetworkError):
    """Raised by transports when no HTTP response could be obtained."""

    def __init__(
        self,
        message: str,
        *,
        category: TransportErrorCategory = TransportErrorCategory.OTHER,
    ) -> None:
        super().__init__(message)
        self.category = category


__all__ = [
    "EncodeFailureError",
    "InvalidURLError",
    "NetworkError",
    "NonHTTPResponseError",
    "ParseFailureError",
    "RequestCancelledError",
    "RequestTimedOutError",
    "RetriesExhaustedError",
    "TransportError",
    "TransportErrorCategory",
    "UnacceptableStatusError",
]
