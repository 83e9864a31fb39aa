from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

import pytest

from sturdy.adapters.http_resilience import ResilientClient
from sturdy.config.http_resilience import ResilienceConfig
from sturdy.core.retry import Backoff, Jitter, RetryPolicy
from tests.support.transport import RecordingSleeper

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.support.transport import ScriptedTransport


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def base_config(sleeper: RecordingSleeper) -> ResilienceConfig:
    return ResilienceConfig(
        name="test",
        base_url="https://api.example.com",
        retry=RetryPolicy(
            max_retries=2,
            backoff=Backoff(initial=0.1, multiplier=2.0, max_delay=1.0, jitter=Jitter.NONE),
        ),
        sleeper=sleeper,
    )


@pytest.fixture
def make_client(
    base_config: ResilienceConfig,
) -> Callable[..., ResilientClient]:
    def factory(transport: ScriptedTransport, **overrides: Any) -> ResilientClient:
        return ResilientClient(replace(base_config, **overrides), transport=transport)

    return factory
