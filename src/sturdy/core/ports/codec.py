"""Port for body encoding and decoding."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Codec(Protocol):
    def encode(self, value: object) -> bytes: ...

    def decode[T](self, data: bytes, target: type[T]) -> T: ...


__all__ = ["Codec"]
