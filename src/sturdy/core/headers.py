"""Case-insensitive HTTP header container."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping


class HTTPHeaders(MutableMapping[str, str]):
    """Header mapping keyed by the lower-cased header name.

    Assignment is last-write-wins. Use :meth:`add` for genuinely multi-valued
    headers: the new value is appended to any existing one, comma separated.

    :meth:`freeze` returns a read-only copy; requests, responses and endpoints
    hold frozen headers, and :meth:`copy` always gives back a mutable one.
    """

    __slots__ = ("_frozen", "_storage")

    def __init__(
        self,
        items: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._storage: dict[str, str] = {}
        self._frozen = False
        if items is None:
            return
        pairs = items.items() if isinstance(items, Mapping) else items
        for name, value in pairs:
            self._storage[name.lower()] = value

    def __getitem__(self, name: str) -> str:
        return self._storage[name.lower()]

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError("Headers are read-only; use copy() for a mutable version")

    def __setitem__(self, name: str, value: str) -> None:
        self._check_mutable()
        self._storage[name.lower()] = value

    def __delitem__(self, name: str) -> None:
        self._check_mutable()
        del self._storage[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._storage

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HTTPHeaders):
            return self._storage == other._storage
        if isinstance(other, Mapping):
            return self == HTTPHeaders(other)  # pyright: ignore[reportUnknownArgumentType]
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HTTPHeaders({self._storage!r})"

    def add(self, name: str, value: str) -> None:
        self._check_mutable()
        key = name.lower()
        existing = self._storage.get(key)
        self._storage[key] = f"{existing}, {value}" if existing else value

    def merge(self, other: Mapping[str, str]) -> None:
        self._check_mutable()
        for name, value in other.items():
            self[name] = value

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> HTTPHeaders:
        if self._frozen:
            return self
        frozen = HTTPHeaders(self._storage)
        frozen._frozen = True
        return frozen

    def copy(self) -> HTTPHeaders:
        return HTTPHeaders(self._storage)

    def as_dict(self) -> dict[str, str]:
        return dict(self._storage)


__all__ = ["HTTPHeaders"]
