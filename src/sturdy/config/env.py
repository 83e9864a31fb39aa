"""Read ``STURDY_*`` settings from the process environment.

A variable that is unset and one that holds only whitespace are treated the
same way, so an empty line in a ``.env`` file never overrides a default.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def _read(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Map each of ``names`` to its stripped value.

    Raises :class:`MissingConfigurationError` naming every absent variable,
    not just the first one found.
    """
    values = {name: value for name in names if (value := _read(name)) is not None}
    missing = {name for name in names if name not in values}
    if missing:
        raise MissingConfigurationError(missing)
    return values


def optional_env_var[T](name: str, convert: Callable[[str], T]) -> T | None:
    """Converted value of ``name``, or ``None`` when it is not set.

    ``convert`` signals a bad value with :class:`ValueError`; that becomes a
    :class:`ConfigurationError` naming the variable.
    """
    value = _read(name)
    if value is None:
        return None
    try:
        return convert(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc
