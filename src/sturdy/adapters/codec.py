"""JSON codec backed by pydantic."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class PydanticJSONCodec:
    """Encode arbitrary values and decode into any type pydantic can validate.

    Models, dataclasses, ``TypedDict`` and plain containers all work as targets.
    """

    def encode(self, value: object) -> bytes:
        return _adapter(type(value)).dump_json(value)

    def decode[T](self, data: bytes, target: type[T]) -> T:
        return _adapter(target).validate_json(data)


__all__ = ["PydanticJSONCodec"]
