"""The complete halfedge mesh: collapses, removals, deletion and compaction."""

from __future__ import annotations

from typing import Callable

from halfmesh.handles import Edge, Face, Halfedge, Vertex
from halfmesh.properties import Property
from halfmesh.topology import TopologyMesh

__all__ = ["SurfaceMesh"]


def _compact(deleted: Property[bool], n: int, swap: Callable[[int, int], None]) -> int:
    """Move live entries to the front by swapping; return how many are live."""
    if n == 0:
        return 0
    i0, i1 = 0, n - 1
    while True:
        while not deleted[i0] and i0 < i1:
            i0 += 1
        while deleted[i1] and i0 < i1:
            i1 -= 1
        if i0 >= i1:
            break
        swap(i0, i1)
    return i0 if deleted[i0] else i0 + 1


class SurfaceMesh(TopologyMesh):
    """A halfedge data structure for polygonal meshes.

    Deleting or collapsing elements only marks them as deleted; call
    :meth:`garbage_collection` to remove them for good.
    """

    # ----------------------------------------------------------- collapse

    def is_collapse_ok(self, h: Halfedge) -> bool:
        """Return whether collapsing ``h`` is topologically legal (triangle meshes)."""
        v0v1 = h
        v1v0 = self.opposite_halfedge(v0v1)
        v0 = self.to_vertex(v1v0)
        v1 = self.to_vertex(v0v1)
        vl = Vertex()
        vr = Vertex()

        # the edges v1-vl and vl-v0 must not both be boundary edges
        if not self.is_boundary(v0v1):
            h1 = self.next_halfedge(v0v1)
            h2 = self.next_halfedge(h1)
            vl = self.to_vertex(h1)
            if self.is_boundary(self.opposite_halfedge(h1)) and self.is_boundary(
                self.opposite_halfedge(h2)
            ):
                return False

        # the edges v0-vr and vr-v1 must not both be boundary edges
        if not self.is_boundary(v1v0):
            h1 = self.next_halfedge(v1v0)
            h2 = self.next_halfedge(h1)
            vr = self.to_vertex(h1)
            if self.is_boundary(self.opposite_halfedge(h1)) and self.is_boundary(
                self.opposite_halfedge(h2)
            ):
                return False

        # vl and vr equal or both invalid
        if vl == vr:
            return False

        # an edge between two boundary vertices should be a boundary edge
        if (
            self.is_boundary(v0)
            and self.is_boundary(v1)
            and not self.is_boundary(v0v1)
            and not self.is_boundary(v1v0)
        ):
            return False

        # the one-rings of v0 and v1 may only share vl and vr
        for vv in list(self.vertices(v0)):
            if vv not in (v1, vl, vr) and self.find_halfedge(vv, v1).is_valid():
                return False

        return True

    def collapse(self, h: Halfedge) -> None:
        """Move the start vertex of ``h`` into its end vertex (triangle meshes).

        Check :meth:`is_collapse_ok` first; removed items are only marked
        deleted.
        """
        h0 = h
        h1 = self.prev_halfedge(h0)
        o0 = self.opposite_halfedge(h0)
        o1 = self.next_halfedge(o0)

        self._remove_edge_helper(h0)

        if self.next_halfedge(self.next_halfedge(h1)) == h1:
            self._remove_loop_helper(h1)
        if self.next_halfedge(self.next_halfedge(o1)) == o1:
            self._remove_loop_helper(o1)

    def _remove_edge_helper(self, h: Halfedge) -> None:
        hn = self.next_halfedge(h)
        hp = self.prev_halfedge(h)

        o = self.opposite_halfedge(h)
        on = self.next_halfedge(o)
        op = self.prev_halfedge(o)

        fh = self.face(h)
        fo = self.face(o)

        vh = self.to_vertex(h)
        vo = self.to_vertex(o)

        for hc in list(self.halfedges(vo)):
            self.set_vertex(self.opposite_halfedge(hc), vh)

        self.set_next_halfedge(hp, hn)
        self.set_next_halfedge(op, on)

        if fh.is_valid():
            self.set_halfedge(fh, hn)
        if fo.is_valid():
            self.set_halfedge(fo, on)

        if self.halfedge(vh) == o:
            self.set_halfedge(vh, hn)
        self._adjust_outgoing_halfedge(vh)
        self.set_halfedge(vo, Halfedge())

        self._vdeleted[vo] = True
        self._deleted_vertices += 1
        self._edeleted[self.edge(h)] = True
        self._deleted_edges += 1
        self._has_garbage = True

    def _remove_loop_helper(self, h: Halfedge) -> None:
        h0 = h
        h1 = self.next_halfedge(h0)

        o0 = self.opposite_halfedge(h0)
        o1 = self.opposite_halfedge(h1)

        v0 = self.to_vertex(h0)
        v1 = self.to_vertex(h1)

        fh = self.face(h0)
        fo = self.face(o0)

        if self.next_halfedge(h1) != h0 or h1 == o0:
            raise ValueError(f"halfedge {h} does not start a loop")

        self.set_next_halfedge(h1, self.next_halfedge(o0))
        self.set_next_halfedge(self.prev_halfedge(o0), h1)

        self.set_face(h1, fo)

        self.set_halfedge(v0, h1)
        self._adjust_outgoing_halfedge(v0)
        self.set_halfedge(v1, o1)
        self._adjust_outgoing_halfedge(v1)

        if fo.is_valid() and self.halfedge(fo) == o0:
            self.set_halfedge(fo, h1)

        if fh.is_valid():
            self._fdeleted[fh] = True
            self._deleted_faces += 1
        self._edeleted[self.edge(h)] = True
        self._deleted_edges += 1
        self._has_garbage = True

    # ------------------------------------------------------- edge removal

    def is_removal_ok(self, e: Edge) -> bool:
        """Return whether ``e`` can be removed, merging its two faces."""
        h0 = self.halfedge(e, 0)
        h1 = self.halfedge(e, 1)
        v0 = self.to_vertex(h0)
        v1 = self.to_vertex(h1)
        f0 = self.face(h0)
        f1 = self.face(h1)

        if not f0.is_valid() or not f1.is_valid():
            return False
        if f0 == f1:
            return False

        # the two faces must not also meet at another vertex
        for v in self.vertices(f0):
            if v != v0 and v != v1:
                if any(f == f1 for f in self.faces(v)):
                    return False
        return True

    def remove_edge(self, e: Edge) -> bool:
        """Remove ``e`` and merge its two faces; return False if not allowed."""
        if not self.is_removal_ok(e):
            return False

        h0 = self.halfedge(e, 0)
        h1 = self.halfedge(e, 1)

        v0 = self.to_vertex(h0)
        v1 = self.to_vertex(h1)

        f0 = self.face(h0)
        f1 = self.face(h1)

        h0_prev = self.prev_halfedge(h0)
        h0_next = self.next_halfedge(h0)
        h1_prev = self.prev_halfedge(h1)
        h1_next = self.next_halfedge(h1)

        if self.halfedge(v0) == h1:
            self.set_halfedge(v0, h0_next)
        if self.halfedge(v1) == h0:
            self.set_halfedge(v1, h1_next)

        for h in list(self.halfedges(f0)):
            self.set_face(h, f1)

        self.set_next_halfedge(h1_prev, h0_next)
        self.set_next_halfedge(h0_prev, h1_next)

        if self.halfedge(f1) == h1:
            self.set_halfedge(f1, h1_next)

        self._fdeleted[f0] = True
        self._deleted_faces += 1
        self._edeleted[e] = True
        self._deleted_edges += 1
        self._has_garbage = True
        return True

    # ----------------------------------------------------------- deletion

    def delete_vertex(self, v: Vertex) -> None:
        """Delete ``v`` together with all faces incident to it."""
        if self.is_deleted(v):
            return
        for f in list(self.faces(v)):
            self.delete_face(f)
        if not self._vdeleted[v]:
            self._vdeleted[v] = True
            self._deleted_vertices += 1
            self._has_garbage = True

    def delete_edge(self, e: Edge) -> None:
        """Delete ``e`` by deleting the faces on both of its sides."""
        if self.is_deleted(e):
            return
        f0 = self.face(self.halfedge(e, 0))
        f1 = self.face(self.halfedge(e, 1))
        if f0.is_valid():
            self.delete_face(f0)
        if f1.is_valid():
            self.delete_face(f1)

    def delete_face(self, f: Face) -> None:
        """Delete ``f``, along with edges and vertices left without any face."""
        if self._fdeleted[f]:
            return
        self._fdeleted[f] = True
        self._deleted_faces += 1

        deleted_edges: list[Edge] = []
        corners: list[Vertex] = []
        for hc in list(self.halfedges(f)):
            self.set_face(hc, Face())
            if self.is_boundary(self.opposite_halfedge(hc)):
                deleted_edges.append(self.edge(hc))
            corners.append(self.to_vertex(hc))

        for e in deleted_edges:
            h0 = self.halfedge(e, 0)
            v0 = self.to_vertex(h0)
            next0 = self.next_halfedge(h0)
            prev0 = self.prev_halfedge(h0)

            h1 = self.halfedge(e, 1)
            v1 = self.to_vertex(h1)
            next1 = self.next_halfedge(h1)
            prev1 = self.prev_halfedge(h1)

            self.set_next_halfedge(prev0, next1)
            self.set_next_halfedge(prev1, next0)

            if not self._edeleted[e]:
                self._edeleted[e] = True
                self._deleted_edges += 1

            if self.halfedge(v0) == h1:
                if next0 == h1:
                    self._mark_vertex_deleted(v0)
                else:
                    self.set_halfedge(v0, next0)

            if self.halfedge(v1) == h0:
                if next1 == h0:
                    self._mark_vertex_deleted(v1)
                else:
                    self.set_halfedge(v1, next1)

        for v in corners:
            self._adjust_outgoing_halfedge(v)

        self._has_garbage = True

    def _mark_vertex_deleted(self, v: Vertex) -> None:
        if not self._vdeleted[v]:
            self._vdeleted[v] = True
            self._deleted_vertices += 1

    # ---------------------------------------------------------- compaction

    def garbage_collection(self) -> None:
        """Remove all deleted elements and renumber the remaining ones."""
        if not self._has_garbage:
            return

        n_v = self.vertices_size()
        n_e = self.edges_size()
        n_h = self.halfedges_size()
        n_f = self.faces_size()

        vmap = self.add_vertex_property("v:garbage-collection", Vertex())
        hmap = self.add_halfedge_property("h:garbage-collection", Halfedge())
        fmap = self.add_face_property("f:garbage-collection", Face())
        vmap.vector()[:] = [Vertex(i) for i in range(n_v)]
        hmap.vector()[:] = [Halfedge(i) for i in range(n_h)]
        fmap.vector()[:] = [Face(i) for i in range(n_f)]

        n_v = _compact(self._vdeleted, n_v, self._vprops.swap)

        def swap_edges(i0: int, i1: int) -> None:
            self._eprops.swap(i0, i1)
            self._hprops.swap(2 * i0, 2 * i1)
            self._hprops.swap(2 * i0 + 1, 2 * i1 + 1)

        if n_e > 0:
            n_e = _compact(self._edeleted, n_e, swap_edges)
            n_h = 2 * n_e

        n_f = _compact(self._fdeleted, n_f, self._fprops.swap)

        for i in range(n_v):
            v = Vertex(i)
            if not self.is_isolated(v):
                self.set_halfedge(v, hmap[self.halfedge(v)])

        for i in range(n_h):
            h = Halfedge(i)
            self.set_vertex(h, vmap[self.to_vertex(h)])
            self.set_next_halfedge(h, hmap[self.next_halfedge(h)])
            if not self.is_boundary(h):
                self.set_face(h, fmap[self.face(h)])

        for i in range(n_f):
            f = Face(i)
            self.set_halfedge(f, hmap[self.halfedge(f)])

        self.remove_vertex_property(vmap)
        self.remove_halfedge_property(hmap)
        self.remove_face_property(fmap)

        self._vprops.resize(n_v)
        self._hprops.resize(n_h)
        self._eprops.resize(n_e)
        self._fprops.resize(n_f)
        self.free_memory()

        self._deleted_vertices = 0
        self._deleted_edges = 0
        self._deleted_faces = 0
        self._has_garbage = False