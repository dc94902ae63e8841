"""components.protocols — Insertion-ordered set of protocol ids.

Iteration and serialization follow first-insertion order, so two
runs that activated the same protocols in the same order serialize
identically.
"""

from __future__ import annotations
from typing import Iterable, Iterator


class ProtocolSet:
    """Small ordered set of protocol family ids."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._items: list[str] = []
        for item in items:
            self.add(item)

    def add(self, protocol: str) -> None:
        if protocol not in self._items:
            self._items.append(protocol)

    def copy(self) -> "ProtocolSet":
        clone = ProtocolSet()
        clone._items = list(self._items)
        return clone

    def to_list(self) -> list[str]:
        return list(self._items)

    def __contains__(self, protocol: object) -> bool:
        return protocol in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ProtocolSet):
            return set(self._items) == set(other._items)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ProtocolSet({self._items!r})"
