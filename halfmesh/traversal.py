"""Iteration over mesh elements and around vertices and faces."""

from __future__ import annotations

import math
from typing import Callable, Iterator, TypeVar

from halfmesh.handles import Edge, Face, Halfedge, Handle, Vertex
from halfmesh.mesh_base import MeshBase, Point

__all__ = ["TraversableMesh"]

H = TypeVar("H", bound=Handle)


class TraversableMesh(MeshBase):
    """A mesh that can be walked element by element and around its elements.

    Called without an argument, ``vertices``, ``halfedges`` and ``faces`` run
    over every element that is not deleted, in index order. Given a vertex or
    a face they circulate around it instead.
    """

    # ------------------------------------------------------------ helpers

    def _linear(self, kind: Callable[[int], H], size: int) -> Iterator[H]:
        for i in range(size):
            handle = kind(i)
            if self.has_garbage() and self.is_deleted(handle):
                continue
            yield handle

    def _outgoing(self, v: Vertex) -> Iterator[Halfedge]:
        start = self.halfedge(v)
        if not start.is_valid():
            return
        h = start
        while True:
            yield h
            h = self.ccw_rotated_halfedge(h)
            if h == start:
                return

    def _around_face(self, f: Face) -> Iterator[Halfedge]:
        start = self.halfedge(f)
        if not start.is_valid():
            return
        h = start
        while True:
            yield h
            h = self.next_halfedge(h)
            if h == start:
                return

    # --------------------------------------------------------- iteration

    def vertices(self, of: Vertex | Face | None = None) -> Iterator[Vertex]:
        """All vertices, the one-ring of a vertex, or the corners of a face."""
        if of is None:
            return self._linear(Vertex, self.vertices_size())
        if isinstance(of, Vertex):
            return (self.to_vertex(h) for h in self._outgoing(of))
        if isinstance(of, Face):
            return (self.to_vertex(h) for h in self._around_face(of))
        raise TypeError(f"expected a Vertex or Face, got {of!r}")

    def halfedges(self, of: Vertex | Face | None = None) -> Iterator[Halfedge]:
        """All halfedges, the outgoing halfedges of a vertex, or those of a face."""
        if of is None:
            return self._linear(Halfedge, self.halfedges_size())
        if isinstance(of, Vertex):
            return self._outgoing(of)
        if isinstance(of, Face):
            return self._around_face(of)
        raise TypeError(f"expected a Vertex or Face, got {of!r}")

    def edges(self) -> Iterator[Edge]:
        """All edges that are not deleted."""
        return self._linear(Edge, self.edges_size())

    def faces(self, of: Vertex | None = None) -> Iterator[Face]:
        """All faces, or the faces incident to a vertex."""
        if of is None:
            return self._linear(Face, self.faces_size())
        if isinstance(of, Vertex):
            return (
                self.face(h) for h in self._outgoing(of) if not self.is_boundary(h)
            )
        raise TypeError(f"expected a Vertex, got {of!r}")

    # ------------------------------------------------------------ queries

    def is_manifold(self, v: Vertex) -> bool:
        """Return whether ``v`` has at most one gap (outgoing boundary halfedge)."""
        gaps = sum(1 for h in self._outgoing(v) if self.is_boundary(h))
        return gaps < 2

    def bounds(self) -> tuple[Point, Point]:
        """The lower and upper corners of the box around all vertices.

        An empty mesh gives an empty box: lower corner at +inf, upper at -inf.
        """
        lo = [math.inf] * 3
        hi = [-math.inf] * 3
        for v in self.vertices():
            for axis, c in enumerate(self.position(v)):
                lo[axis] = min(lo[axis], c)
                hi[axis] = max(hi[axis], c)
        return (lo[0], lo[1], lo[2]), (hi[0], hi[1], hi[2])

    def edge_length(self, e: Edge) -> float:
        """The distance between the two end points of ``e``."""
        return math.dist(
            self.position(self.vertex(e, 0)), self.position(self.vertex(e, 1))
        )