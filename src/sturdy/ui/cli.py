from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from sturdy.adapters.http_resilience import with_resilience
from sturdy.adapters.network_logger import LoggingNetworkLogger
from sturdy.common.logging import configure_logging
from sturdy.config import ConfigurationError, get_resilience_config
from sturdy.core.endpoint import CacheDirective, Endpoint
from sturdy.core.errors import NetworkError
from sturdy.core.http import HTTPMethod

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from sturdy.adapters.http_resilience import ResilientClient
    from sturdy.config.http_resilience import ResilienceConfig
    from sturdy.core.ports.transport import Transport

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send resilient HTTP requests")
    parser.add_argument("--verbose", action="store_true", help="Log every request and retry")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get = subparsers.add_parser("get", help="GET a path relative to STURDY_BASE_URL")
    get.add_argument("path", type=str, help="Path appended to the base URL")
    get.add_argument(
        "--query",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Query parameter; repeat to add more (order is kept)",
    )
    get.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Extra request header; repeat to add more",
    )
    get.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Retry budget for this call (defaults to config)",
    )
    get.add_argument(
        "--cache-ttl",
        type=float,
        default=None,
        help="Cache the response in memory for this many seconds",
    )

    return parser.parse_args(list(argv))


def _split_pair(value: str, separator: str) -> tuple[str, str]:
    name, found, rest = value.partition(separator)
    if not found or not name.strip():
        raise ValueError(f"Expected NAME{separator}VALUE, got {value!r}")
    return name.strip(), rest.strip()


def _build_endpoint(args: argparse.Namespace) -> Endpoint[bytes]:
    query = [_split_pair(item, "=") for item in args.query]
    headers = dict(_split_pair(item, ":") for item in args.header)
    cache = CacheDirective.manual(args.cache_ttl) if args.cache_ttl is not None else None
    return Endpoint.data(HTTPMethod.GET, args.path, query=query, headers=headers, cache=cache)


def _apply_overrides(config: ResilienceConfig, args: argparse.Namespace) -> ResilienceConfig:
    if args.verbose:
        config = replace(config, logger=LoggingNetworkLogger())
    if args.max_retries is not None:
        if args.max_retries < 0:
            raise ValueError("--max-retries must be non-negative")
        config = replace(config, retry=replace(config.retry, max_retries=args.max_retries))
    if args.cache_ttl is not None and args.cache_ttl <= 0:
        raise ValueError("--cache-ttl must be positive")
    return config


def _fetch(
    config: ResilienceConfig,
    endpoint: Endpoint[bytes],
    transport_factory: Callable[[], Transport] | None,
) -> bytes:
    @with_resilience(config, transport_factory=transport_factory)
    async def run(client: ResilientClient) -> bytes:
        return await client.send(endpoint)

    return asyncio.run(run())


def main(
    argv: Sequence[str] | None = None,
    *,
    transport_factory: Callable[[], Transport] | None = None,
) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.WARNING)

    try:
        endpoint = _build_endpoint(parsed_args)
        config = _apply_overrides(get_resilience_config(name="cli"), parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        body = _fetch(config, endpoint, transport_factory)
    except NetworkError:
        log.exception("Request failed")
        sys.exit(1)

    sys.stdout.write(body.decode("utf-8", errors="replace"))
    sys.stdout.flush()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
