"""Typed index handles for the entities of a halfedge mesh."""

from __future__ import annotations

from functools import total_ordering

__all__ = ["INVALID_INDEX", "Handle", "Vertex", "Halfedge", "Edge", "Face"]

#: Index value marking a handle that refers to nothing.
INVALID_INDEX = 2**32 - 1


@total_ordering
class Handle:
    """An index into one of the mesh's entity arrays.

    A handle built without an index is invalid. Handles of the same kind
    compare and sort by index; handles of different kinds never compare equal.
    """

    __slots__ = ("idx",)
    _prefix = "?"

    def __init__(self, idx: int = INVALID_INDEX) -> None:
        idx = int(idx)
        if not 0 <= idx <= INVALID_INDEX:
            raise ValueError(f"handle index out of range: {idx}")
        self.idx = idx

    def is_valid(self) -> bool:
        """Return whether the handle refers to an index at all."""
        return self.idx != INVALID_INDEX

    def reset(self) -> None:
        """Make the handle invalid."""
        self.idx = INVALID_INDEX

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.idx == other.idx

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.idx < other.idx

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.idx))

    def __str__(self) -> str:
        return f"{self._prefix}{self.idx}"

    def __repr__(self) -> str:
        if not self.is_valid():
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({self.idx})"


class Vertex(Handle):
    """Handle of a vertex."""

    __slots__ = ()
    _prefix = "v"


class Halfedge(Handle):
    """Handle of a halfedge."""

    __slots__ = ()
    _prefix = "h"


class Edge(Handle):
    """Handle of an edge."""

    __slots__ = ()
    _prefix = "e"


class Face(Handle):
    """Handle of a face."""

    __slots__ = ()
    _prefix = "f"