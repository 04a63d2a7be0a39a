"""Append-only, immutable collection of clip handles."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from clippy.core.geometry import SEED_VERTEX, Vertex

SEED_KEY = 1


@dataclass(frozen=True)
class HandleSet:
    """
    Ordered mapping of handle key -> Vertex.

    Key points:
    - Keys start at 1 and strictly increase in insertion order.
    - Insertion order is the polygon winding order.
    - Instances are never modified; `append` returns a new set, so anyone
      holding the previous set keeps a consistent snapshot.
    """
    entries: tuple[tuple[int, Vertex], ...] = ((SEED_KEY, SEED_VERTEX),)

    def __post_init__(self) -> None:
        keys = [key for key, _ in self.entries]
        if any(b <= a for a, b in zip(keys, keys[1:])):
            raise ValueError(f"Handle keys must be strictly increasing: {keys}")

    def __iter__(self) -> Iterator[tuple[int, Vertex]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    @property
    def first(self) -> Vertex | None:
        """The vertex stored under the lowest key (the seed in a fresh session)."""
        return self.entries[0][1] if self.entries else None

    @property
    def max_key(self) -> int:
        return self.entries[-1][0] if self.entries else 0

    def keys(self) -> list[int]:
        return [key for key, _ in self.entries]

    def vertices(self) -> list[Vertex]:
        return [vertex for _, vertex in self.entries]

    def get(self, key: int) -> Vertex | None:
        for k, vertex in self.entries:
            if k == key:
                return vertex
        return None

    def append(self, vertex: Vertex) -> HandleSet:
        """Return a new set with `vertex` stored under max key + 1."""
        return HandleSet(entries=self.entries + ((self.max_key + 1, vertex),))


def create_session() -> HandleSet:
    """Return a fresh handle set holding only the seed vertex at key 1."""
    return HandleSet()


def append(handles: HandleSet, vertex: Vertex) -> HandleSet:
    return handles.append(vertex)
