"""Building faces and changing the connectivity of a halfedge mesh."""

from __future__ import annotations

import sys
from typing import Iterable, Iterator, Sequence

from halfmesh.handles import Edge, Face, Halfedge, Vertex
from halfmesh.traversal import TraversableMesh

__all__ = ["TopologyError", "TopologyMesh"]


class TopologyError(RuntimeError):
    """Raised when an operation would break the mesh's topology."""


def _cyclic_pairs(n: int) -> Iterator[tuple[int, int]]:
    """Yield (i, i+1 mod n) for every corner of an n-gon."""
    for i in range(n):
        yield i, (i + 1) % n


class TopologyMesh(TraversableMesh):
    """A traversable mesh with face construction and local topology edits."""

    # ------------------------------------------------- copy and lifetime

    def copy(self) -> TopologyMesh:
        """Return a deep copy, custom properties included."""
        other = type(self)()
        other._oprops = self._oprops.copy()
        other._vprops = self._vprops.copy()
        other._hprops = self._hprops.copy()
        other._eprops = self._eprops.copy()
        other._fprops = self._fprops.copy()
        other._bind_standard_properties()
        other._deleted_vertices = self._deleted_vertices
        other._deleted_edges = self._deleted_edges
        other._deleted_faces = self._deleted_faces
        other._has_garbage = self._has_garbage
        return other

    def __copy__(self) -> TopologyMesh:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> TopologyMesh:
        return self.copy()

    def assign(self, other: TopologyMesh) -> TopologyMesh:
        """Take over the geometry and connectivity of ``other``.

        Custom properties are neither copied from ``other`` nor kept.
        """
        if other is self:
            return self
        self._reset_storage()
        pairs = (
            (self._vpoint, other._vpoint),
            (self._vconn, other._vconn),
            (self._hconn, other._hconn),
            (self._fconn, other._fconn),
            (self._vdeleted, other._vdeleted),
            (self._edeleted, other._edeleted),
            (self._fdeleted, other._fdeleted),
        )
        for mine, theirs in pairs:
            mine.vector()[:] = [
                _clone(value) for value in theirs.vector()
            ]
        self._vprops.resize(other.vertices_size())
        self._hprops.resize(other.halfedges_size())
        self._eprops.resize(other.edges_size())
        self._fprops.resize(other.faces_size())
        self._deleted_vertices = other._deleted_vertices
        self._deleted_edges = other._deleted_edges
        self._deleted_faces = other._deleted_faces
        self._has_garbage = other._has_garbage
        return self

    def clear(self) -> None:
        """Remove all elements and all custom properties."""
        self._reset_storage()

    def free_memory(self) -> None:
        """Trim every property array to the length of its container."""
        for container in (
            self._oprops,
            self._vprops,
            self._hprops,
            self._eprops,
            self._fprops,
        ):
            size = len(container)
            for name in container.properties():
                prop = container.get(name)
                if prop is not None:
                    del prop.vector()[size:]

    def reserve(self, nvertices: int, nedges: int, nfaces: int) -> None:
        """Check a size hint; lists grow on demand, so nothing is preallocated."""
        for label, count in (
            ("vertices", nvertices),
            ("edges", nedges),
            ("faces", nfaces),
        ):
            if int(count) < 0:
                raise ValueError(f"cannot reserve a negative number of {label}")

    def property_stats(self) -> None:
        """Print the names of all vertex, halfedge, edge and face properties."""
        out = sys.stdout
        for title, names in (
            ("point properties:", self.vertex_properties()),
            ("halfedge properties:", self.halfedge_properties()),
            ("edge properties:", self.edge_properties()),
            ("face properties:", self.face_properties()),
        ):
            print(title, file=out)
            for name in names:
                print(f"\t{name}", file=out)

    # ------------------------------------------------------ construction

    def add_face(self, vertices: Iterable[Vertex]) -> Face:
        """Add a face through ``vertices`` in order.

        Raises TopologyError if the face would make a vertex or an edge
        non-manifold, and ValueError for fewer than three vertices.
        """
        verts = list(vertices)
        n = len(verts)
        if n < 3:
            raise ValueError(f"a face needs at least 3 vertices, got {n}")
        for v in verts:
            if not self.is_valid(v):
                raise ValueError(f"invalid vertex {v!r}")

        halfedges: list[Halfedge] = [Halfedge() for _ in range(n)]
        is_new = [False] * n
        needs_adjust = [False] * n
        next_cache: list[tuple[Halfedge, Halfedge]] = []

        # test for topological errors
        for i, ii in _cyclic_pairs(n):
            if not self.is_boundary(verts[i]):
                raise TopologyError("SurfaceMesh.add_face: Complex vertex.")
            halfedges[i] = self.find_halfedge(verts[i], verts[ii])
            is_new[i] = not halfedges[i].is_valid()
            if not is_new[i] and not self.is_boundary(halfedges[i]):
                raise TopologyError("SurfaceMesh.add_face: Complex edge.")

        # re-link patches if necessary
        for i, ii in _cyclic_pairs(n):
            if is_new[i] or is_new[ii]:
                continue
            inner_prev = halfedges[i]
            inner_next = halfedges[ii]
            if self.next_halfedge(inner_prev) == inner_next:
                continue
            # search a free gap between boundary_prev and boundary_next
            boundary_prev = self.opposite_halfedge(inner_next)
            while True:
                boundary_prev = self.opposite_halfedge(
                    self.next_halfedge(boundary_prev)
                )
                if self.is_boundary(boundary_prev) and boundary_prev != inner_prev:
                    break
            boundary_next = self.next_halfedge(boundary_prev)
            if boundary_next == inner_next:
                raise TopologyError(
                    "SurfaceMesh.add_face: Patch re-linking failed."
                )
            patch_start = self.next_halfedge(inner_prev)
            patch_end = self.prev_halfedge(inner_next)
            next_cache.append((boundary_prev, patch_start))
            next_cache.append((patch_end, boundary_next))
            next_cache.append((inner_prev, inner_next))

        # create missing edges
        for i, ii in _cyclic_pairs(n):
            if is_new[i]:
                halfedges[i] = self.new_edge(verts[i], verts[ii])

        # create the face
        f = self.new_face()
        self.set_halfedge(f, halfedges[n - 1])

        # setup halfedges
        for i, ii in _cyclic_pairs(n):
            v = verts[ii]
            inner_prev = halfedges[i]
            inner_next = halfedges[ii]
            prev_new, next_new = is_new[i], is_new[ii]

            if prev_new or next_new:
                outer_prev = self.opposite_halfedge(inner_next)
                outer_next = self.opposite_halfedge(inner_prev)
                if prev_new and not next_new:
                    boundary_prev = self.prev_halfedge(inner_next)
                    next_cache.append((boundary_prev, outer_next))
                    self.set_halfedge(v, outer_next)
                elif next_new and not prev_new:
                    boundary_next = self.next_halfedge(inner_prev)
                    next_cache.append((outer_prev, boundary_next))
                    self.set_halfedge(v, boundary_next)
                elif not self.halfedge(v).is_valid():
                    self.set_halfedge(v, outer_next)
                    next_cache.append((outer_prev, outer_next))
                else:
                    boundary_next = self.halfedge(v)
                    boundary_prev = self.prev_halfedge(boundary_next)
                    next_cache.append((boundary_prev, outer_next))
                    next_cache.append((outer_prev, boundary_next))
                next_cache.append((inner_prev, inner_next))
            else:
                needs_adjust[ii] = self.halfedge(v) == inner_next

            self.set_face(halfedges[i], f)

        for h, nh in next_cache:
            self.set_next_halfedge(h, nh)

        for v, adjust in zip(verts, needs_adjust):
            if adjust:
                self._adjust_outgoing_halfedge(v)

        return f

    def add_triangle(self, v0: Vertex, v1: Vertex, v2: Vertex) -> Face:
        """Add the triangle (v0, v1, v2)."""
        return self.add_face((v0, v1, v2))

    def add_quad(self, v0: Vertex, v1: Vertex, v2: Vertex, v3: Vertex) -> Face:
        """Add the quad (v0, v1, v2, v3)."""
        return self.add_face((v0, v1, v2, v3))

    # ----------------------------------------------------------- queries

    def find_halfedge(self, start: Vertex, end: Vertex) -> Halfedge:
        """The halfedge from ``start`` to ``end``, or an invalid one."""
        if not (self.is_valid(start) and self.is_valid(end)):
            raise ValueError(f"invalid vertices {start!r}, {end!r}")
        first = h = self.halfedge(start)
        if h.is_valid():
            while True:
                if self.to_vertex(h) == end:
                    return h
                h = self.cw_rotated_halfedge(h)
                if h == first:
                    break
        return Halfedge()

    def find_edge(self, a: Vertex, b: Vertex) -> Edge:
        """The edge between ``a`` and ``b``, or an invalid one."""
        h = self.find_halfedge(a, b)
        return self.edge(h) if h.is_valid() else Edge()

    def valence(self, item: Vertex | Face) -> int:
        """Number of neighbours of a vertex, or of corners of a face."""
        if not isinstance(item, (Vertex, Face)):
            raise TypeError(f"expected a Vertex or Face, got {item!r}")
        return sum(1 for _ in self.vertices(item))

    def is_triangle_mesh(self) -> bool:
        """Return whether every face is a triangle."""
        return all(self.valence(f) == 3 for f in self.faces())

    def is_quad_mesh(self) -> bool:
        """Return whether every face is a quad."""
        return all(self.valence(f) == 4 for f in self.faces())

    # ------------------------------------------------------------- edits

    def _adjust_outgoing_halfedge(self, v: Vertex) -> None:
        """Make the outgoing halfedge of a boundary vertex a boundary halfedge."""
        first = h = self.halfedge(v)
        if not h.is_valid():
            return
        while True:
            if self.is_boundary(h):
                self.set_halfedge(v, h)
                return
            h = self.cw_rotated_halfedge(h)
            if h == first:
                return

    def _as_vertex(self, v: Vertex | Sequence[float]) -> Vertex:
        return v if isinstance(v, Vertex) else self.add_vertex(v)

    def insert_vertex(
        self, item: Edge | Halfedge, v: Vertex | Sequence[float]
    ) -> Halfedge:
        """Split an edge or halfedge in two at ``v`` (a vertex or a point).

        No other edges or faces are added. Returns the halfedge that points
        from the old end vertex to ``v``.
        """
        if isinstance(item, Edge):
            h0 = self.halfedge(item, 0)
        elif isinstance(item, Halfedge):
            h0 = item
        else:
            raise TypeError(f"expected an Edge or Halfedge, got {item!r}")
        v = self._as_vertex(v)

        h2 = self.next_halfedge(h0)
        o0 = self.opposite_halfedge(h0)
        o2 = self.prev_halfedge(o0)
        v2 = self.to_vertex(h0)
        fh = self.face(h0)
        fo = self.face(o0)

        h1 = self.new_edge(v, v2)
        o1 = self.opposite_halfedge(h1)

        self.set_next_halfedge(h1, h2)
        self.set_next_halfedge(h0, h1)
        self.set_vertex(h0, v)
        self.set_vertex(h1, v2)
        self.set_face(h1, fh)

        self.set_next_halfedge(o1, o0)
        self.set_next_halfedge(o2, o1)
        self.set_vertex(o1, v)
        self.set_face(o1, fo)

        self.set_halfedge(v2, o1)
        self._adjust_outgoing_halfedge(v2)
        self.set_halfedge(v, h1)
        self._adjust_outgoing_halfedge(v)

        if fh.is_valid():
            self.set_halfedge(fh, h0)
        if fo.is_valid():
            self.set_halfedge(fo, o1)

        return o1

    def split(
        self, item: Face | Edge, v: Vertex | Sequence[float]
    ) -> Vertex | Halfedge:
        """Split a face or a triangle-mesh edge at ``v`` (a vertex or a point).

        A face is fanned into triangles around ``v`` and the vertex is
        returned. An edge is split and connected to the opposite corners of
        its triangles; the new halfedge pointing to ``v`` is returned.
        """
        if isinstance(item, Face):
            vertex = self._as_vertex(v)
            self._split_face(item, vertex)
            return vertex
        if isinstance(item, Edge):
            return self._split_edge(item, self._as_vertex(v))
        raise TypeError(f"expected a Face or Edge, got {item!r}")

    def _split_face(self, f: Face, v: Vertex) -> None:
        hend = self.halfedge(f)
        h = self.next_halfedge(hend)

        hold = self.new_edge(self.to_vertex(hend), v)
        self.set_next_halfedge(hend, hold)
        self.set_face(hold, f)
        hold = self.opposite_halfedge(hold)

        while h != hend:
            hnext = self.next_halfedge(h)

            fnew = self.new_face()
            self.set_halfedge(fnew, h)

            hnew = self.new_edge(self.to_vertex(h), v)

            self.set_next_halfedge(hnew, hold)
            self.set_next_halfedge(hold, h)
            self.set_next_halfedge(h, hnew)

            self.set_face(hnew, fnew)
            self.set_face(hold, fnew)
            self.set_face(h, fnew)

            hold = self.opposite_halfedge(hnew)
            h = hnext

        self.set_next_halfedge(hold, hend)
        self.set_next_halfedge(self.next_halfedge(hend), hold)
        self.set_face(hold, f)
        self.set_halfedge(v, hold)

    def _split_edge(self, e: Edge, v: Vertex) -> Halfedge:
        h0 = self.halfedge(e, 0)
        o0 = self.halfedge(e, 1)

        v2 = self.to_vertex(o0)

        e1 = self.new_edge(v, v2)
        t1 = self.opposite_halfedge(e1)

        f0 = self.face(h0)
        f3 = self.face(o0)

        self.set_halfedge(v, h0)
        self.set_vertex(o0, v)

        if not self.is_boundary(h0):
            h1 = self.next_halfedge(h0)
            h2 = self.next_halfedge(h1)
            v1 = self.to_vertex(h1)

            e0 = self.new_edge(v, v1)
            t0 = self.opposite_halfedge(e0)

            f1 = self.new_face()
            self.set_halfedge(f0, h0)
            self.set_halfedge(f1, h2)

            self.set_face(h1, f0)
            self.set_face(t0, f0)
            self.set_face(h0, f0)

            self.set_face(h2, f1)
            self.set_face(t1, f1)
            self.set_face(e0, f1)

            self.set_next_halfedge(h0, h1)
            self.set_next_halfedge(h1, t0)
            self.set_next_halfedge(t0, h0)

            self.set_next_halfedge(e0, h2)
            self.set_next_halfedge(h2, t1)
            self.set_next_halfedge(t1, e0)
        else:
            self.set_next_halfedge(self.prev_halfedge(h0), t1)
            self.set_next_halfedge(t1, h0)

        if not self.is_boundary(o0):
            o1 = self.next_halfedge(o0)
            o2 = self.next_halfedge(o1)
            v3 = self.to_vertex(o1)

            e2 = self.new_edge(v, v3)
            t2 = self.opposite_halfedge(e2)

            f2 = self.new_face()
            self.set_halfedge(f2, o1)
            self.set_halfedge(f3, o0)

            self.set_face(o1, f2)
            self.set_face(t2, f2)
            self.set_face(e1, f2)

            self.set_face(o2, f3)
            self.set_face(o0, f3)
            self.set_face(e2, f3)

            self.set_next_halfedge(e1, o1)
            self.set_next_halfedge(o1, t2)
            self.set_next_halfedge(t2, e1)

            self.set_next_halfedge(o0, e2)
            self.set_next_halfedge(e2, o2)
            self.set_next_halfedge(o2, o0)
        else:
            self.set_next_halfedge(e1, self.next_halfedge(o0))
            self.set_next_halfedge(o0, e1)
            self.set_halfedge(v, e1)

        if self.halfedge(v2) == h0:
            self.set_halfedge(v2, t1)

        return t1

    def insert_edge(self, h0: Halfedge, h1: Halfedge) -> Halfedge:
        """Connect the end vertices of ``h0`` and ``h1``, splitting their face.

        Both halfedges must belong to the same face. Returns the new
        halfedge from the end of ``h0`` to the end of ``h1``.
        """
        f0 = self.face(h0)
        if f0 != self.face(h1):
            raise ValueError("both halfedges must belong to the same face")
        if not f0.is_valid():
            raise ValueError("cannot insert an edge into a boundary loop")

        v0 = self.to_vertex(h0)
        v1 = self.to_vertex(h1)

        h2 = self.next_halfedge(h0)
        h3 = self.next_halfedge(h1)

        h4 = self.new_edge(v0, v1)
        h5 = self.opposite_halfedge(h4)

        f1 = self.new_face()

        self.set_halfedge(f0, h0)
        self.set_halfedge(f1, h1)

        self.set_next_halfedge(h0, h4)
        self.set_next_halfedge(h4, h3)
        self.set_face(h4, f0)

        self.set_next_halfedge(h1, h5)
        self.set_next_halfedge(h5, h2)
        h = h2
        while True:
            self.set_face(h, f1)
            h = self.next_halfedge(h)
            if h == h2:
                break

        return h4

    def is_flip_ok(self, e: Edge) -> bool:
        """Return whether ``e`` can be flipped (triangle meshes only)."""
        if self.is_boundary(e):
            return False
        v0 = self.to_vertex(self.next_halfedge(self.halfedge(e, 0)))
        v1 = self.to_vertex(self.next_halfedge(self.halfedge(e, 1)))
        if v0 == v1:
            return False
        return not self.find_halfedge(v0, v1).is_valid()

    def flip(self, e: Edge) -> None:
        """Replace ``e`` by the edge between the opposite corners of its triangles.

        Raises TopologyError if the flip is not allowed.
        """
        if not self.is_flip_ok(e):
            raise TopologyError(f"edge {e} cannot be flipped")

        a0 = self.halfedge(e, 0)
        b0 = self.halfedge(e, 1)

        a1 = self.next_halfedge(a0)
        a2 = self.next_halfedge(a1)

        b1 = self.next_halfedge(b0)
        b2 = self.next_halfedge(b1)

        va0 = self.to_vertex(a0)
        va1 = self.to_vertex(a1)

        vb0 = self.to_vertex(b0)
        vb1 = self.to_vertex(b1)

        fa = self.face(a0)
        fb = self.face(b0)

        self.set_vertex(a0, va1)
        self.set_vertex(b0, vb1)

        self.set_next_halfedge(a0, a2)
        self.set_next_halfedge(a2, b1)
        self.set_next_halfedge(b1, a0)

        self.set_next_halfedge(b0, b2)
        self.set_next_halfedge(b2, a1)
        self.set_next_halfedge(a1, b0)

        self.set_face(a1, fb)
        self.set_face(b1, fa)

        self.set_halfedge(fa, a0)
        self.set_halfedge(fb, b0)

        if self.halfedge(va0) == b0:
            self.set_halfedge(va0, a1)
        if self.halfedge(vb0) == a0:
            self.set_halfedge(vb0, b1)


def _clone(value):
    import copy

    return copy.deepcopy(value)