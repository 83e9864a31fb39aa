"""Logging setup for the Sturdy CLI and embedding applications."""

from __future__ import annotations

import logging

HTTP_LOGGER_NAME = "sturdy.http"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Third-party loggers that log every request at INFO or DEBUG.
NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(
    *,
    level: int = logging.INFO,
    http_level: int | None = None,
    force: bool = False,
) -> None:
    """Initialise the root logger and the request/response wire log.

    ``http_level`` controls the ``sturdy.http`` logger used by
    :class:`~sturdy.adapters.network_logger.LoggingNetworkLogger`; it follows
    ``level`` when omitted. Transport libraries are held at WARNING unless
    ``level`` is DEBUG so the wire log is not drowned out.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    logging.getLogger(HTTP_LOGGER_NAME).setLevel(http_level if http_level is not None else level)
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
