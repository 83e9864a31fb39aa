from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003

import pytest

from sturdy.adapters.auth import BearerTokenAuthenticator
from sturdy.config import (
    ConfigurationError,
    MissingConfigurationError,
    cache_dir,
    get_resilience_config,
    http_cache_path,
    optional_env_var,
    require_env_vars,
)
from sturdy.core.endpoint import CacheMode
from sturdy.core.ports.auth import NoAuth

ENV_VARS = (
    "STURDY_BASE_URL",
    "STURDY_TIMEOUT_SECONDS",
    "STURDY_MAX_RETRIES",
    "STURDY_CACHE_MODE",
    "STURDY_CACHE_TTL_SECONDS",
    "STURDY_BEARER_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.setenv("MISSING_B", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)
    assert exc.value.names == ("MISSING_A", "MISSING_B")


def test_optional_env_var_converts_or_returns_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", " 42 ")
    monkeypatch.setenv("EXAMPLE_BLANK", "")

    assert optional_env_var("EXAMPLE_INT", int) == 42
    assert optional_env_var("EXAMPLE_BLANK", int) is None


def test_optional_env_var_rejects_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "many")

    with pytest.raises(ConfigurationError, match="EXAMPLE_INT"):
        optional_env_var("EXAMPLE_INT", int)


def test_resilience_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STURDY_BASE_URL", "https://api.example.com")

    config = get_resilience_config(name="svc")

    assert config.name == "svc"
    assert config.base_url == "https://api.example.com"
    assert config.timeout_seconds == 30.0
    assert config.retry.max_retries == 2
    assert config.caching.mode is CacheMode.DISABLED
    assert isinstance(config.authenticator, NoAuth)


def test_resilience_config_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STURDY_BASE_URL", "http://localhost:8080/api")
    monkeypatch.setenv("STURDY_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("STURDY_MAX_RETRIES", "0")
    monkeypatch.setenv("STURDY_CACHE_MODE", "manual")
    monkeypatch.setenv("STURDY_CACHE_TTL_SECONDS", "15")
    monkeypatch.setenv("STURDY_BEARER_TOKEN", "tok")

    config = get_resilience_config()

    assert config.timeout_seconds == 2.5
    assert config.retry.max_retries == 0
    assert config.caching.mode is CacheMode.MANUAL
    assert config.caching.default_ttl_seconds == 15.0
    assert isinstance(config.authenticator, BearerTokenAuthenticator)


def test_resilience_config_requires_base_url() -> None:
    with pytest.raises(MissingConfigurationError, match="STURDY_BASE_URL"):
        get_resilience_config()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("STURDY_BASE_URL", "ftp://files.example.com"),
        ("STURDY_MAX_RETRIES", "-1"),
        ("STURDY_TIMEOUT_SECONDS", "0"),
        ("STURDY_CACHE_MODE", "sometimes"),
    ],
)
def test_resilience_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv("STURDY_BASE_URL", "https://api.example.com")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_resilience_config()


def test_cache_dir_prefers_explicit_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    custom = tmp_path / "custom-cache"
    monkeypatch.setenv("STURDY_CACHE_DIR", str(custom))

    path = http_cache_path()

    assert cache_dir() == custom.resolve()
    assert path == custom.resolve() / "http_cache.db"
    assert custom.is_dir()


@pytest.mark.skipif(os.name == "nt", reason="XDG paths are POSIX only")
def test_cache_dir_falls_back_to_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("STURDY_CACHE_DIR", raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))

    path = http_cache_path("other.db", create=False)

    assert path == tmp_path.resolve() / "sturdy" / "other.db"
    assert not path.parent.exists()
