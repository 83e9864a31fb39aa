"""Network logger that writes through the standard logging module."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sturdy.common.logging import HTTP_LOGGER_NAME

if TYPE_CHECKING:
    import httpx

    from sturdy.core.http import HTTPRequest

SENSITIVE_HEADERS = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie", "x-api-key"}
)
REDACTED = "<redacted>"


class LoggingNetworkLogger:
    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        level: int = logging.DEBUG,
        redact: frozenset[str] = SENSITIVE_HEADERS,
    ) -> None:
        self._logger = logger or logging.getLogger(HTTP_LOGGER_NAME)
        self._level = level
        self._redact = frozenset(name.lower() for name in redact)

    def log_request(self, request: HTTPRequest) -> None:
        if not self._logger.isEnabledFor(self._level):
            return
        headers = {
            name: REDACTED if name in self._redact else value
            for name, value in request.headers.items()
        }
        self._logger.log(self._level, f"-> {request.method} {request.url} headers={headers}")

    def log_response(self, status_code: int, url: httpx.URL | None, body_size: int) -> None:
        self._logger.log(self._level, f"<- {status_code} {url} ({body_size} bytes)")


__all__ = ["REDACTED", "SENSITIVE_HEADERS", "LoggingNetworkLogger"]
