"""Request body variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar
from urllib.parse import quote, urlencode

from .errors import EncodeFailureError

if TYPE_CHECKING:
    from .ports.codec import Codec

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


@dataclass(frozen=True, slots=True)
class NoBody:
    def render(self) -> tuple[bytes | None, str | None]:
        return None, None


@dataclass(frozen=True, slots=True)
class RawBody:
    data: bytes
    content_type: str | None = None

    def render(self) -> tuple[bytes | None, str | None]:
        return self.data, self.content_type


@dataclass(frozen=True, slots=True)
class JSONBody:
    """Already-encoded JSON bytes plus the content type to send them with."""

    data: bytes
    content_type: str = JSON_CONTENT_TYPE

    def render(self) -> tuple[bytes | None, str | None]:
        return self.data, self.content_type

    @classmethod
    def encode(
        cls,
        value: object,
        *,
        codec: Codec | None = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> JSONBody:
        if codec is None:
            from sturdy.adapters.codec import PydanticJSONCodec

            codec = PydanticJSONCodec()
        try:
            data = codec.encode(value)
        except EncodeFailureError:
            raise
        except Exception as exc:
            raise EncodeFailureError(exc) from exc
        return cls(data=data, content_type=content_type)


@dataclass(frozen=True, slots=True)
class FormBody:
    items: tuple[tuple[str, str], ...]

    content_type: ClassVar[str] = FORM_CONTENT_TYPE

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple((str(k), str(v)) for k, v in self.items))

    def render(self) -> tuple[bytes | None, str | None]:
        encoded = urlencode(self.items, quote_via=quote, safe="")
        return encoded.encode("utf-8"), self.content_type


RequestBody = NoBody | RawBody | JSONBody | FormBody

__all__ = [
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "FormBody",
    "JSONBody",
    "NoBody",
    "RawBody",
    "RequestBody",
]
