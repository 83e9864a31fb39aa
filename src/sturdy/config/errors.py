"""Errors raised while building a client configuration from ``STURDY_*`` variables.

The CLI turns any of these into exit status 2 before a request is sent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """A ``STURDY_*`` setting is present but its value cannot be used."""


class MissingConfigurationError(ConfigurationError):
    """Required settings are unset or whitespace only.

    ``names`` holds every missing variable, sorted, so one run reports them all.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")
