"""Storage and low-level connectivity of a halfedge mesh."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from halfmesh.handles import INVALID_INDEX, Edge, Face, Halfedge, Handle, Vertex
from halfmesh.properties import Property, PropertyContainer

__all__ = ["AllocationError", "MeshBase", "Point"]

Point = tuple[float, float, float]


class AllocationError(RuntimeError):
    """Raised when no further element can be allocated."""


@dataclass(slots=True)
class _VertexConnectivity:
    # an outgoing halfedge; a boundary halfedge for boundary vertices
    halfedge: Halfedge = field(default_factory=Halfedge)


@dataclass(slots=True)
class _HalfedgeConnectivity:
    face: Face = field(default_factory=Face)
    vertex: Vertex = field(default_factory=Vertex)
    next_halfedge: Halfedge = field(default_factory=Halfedge)
    prev_halfedge: Halfedge = field(default_factory=Halfedge)


@dataclass(slots=True)
class _FaceConnectivity:
    halfedge: Halfedge = field(default_factory=Halfedge)


def _to_point(p: Sequence[float]) -> Point:
    coords = tuple(float(c) for c in p)
    if len(coords) != 3:
        raise ValueError(f"a point needs 3 coordinates, got {len(coords)}")
    return coords  # type: ignore[return-value]


def _check_side(i: int) -> int:
    if i not in (0, 1):
        raise ValueError(f"edge side must be 0 or 1, got {i}")
    return i


class MeshBase:
    """Property storage, element allocation and connectivity accessors."""

    def __init__(self) -> None:
        self._reset_storage()

    # ------------------------------------------------------------ storage

    def _reset_storage(self) -> None:
        """Drop everything and allocate the standard properties afresh."""
        self._oprops = PropertyContainer()
        self._vprops = PropertyContainer()
        self._hprops = PropertyContainer()
        self._eprops = PropertyContainer()
        self._fprops = PropertyContainer()
        self._oprops.push_back()
        self._add_standard_properties()
        self._deleted_vertices = 0
        self._deleted_edges = 0
        self._deleted_faces = 0
        self._has_garbage = False

    def _add_standard_properties(self) -> None:
        self._vpoint = self._vprops.add("v:point", (0.0, 0.0, 0.0))
        self._vconn = self._vprops.add("v:connectivity", _VertexConnectivity())
        self._hconn = self._hprops.add("h:connectivity", _HalfedgeConnectivity())
        self._fconn = self._fprops.add("f:connectivity", _FaceConnectivity())
        self._vdeleted = self._vprops.add("v:deleted", False)
        self._edeleted = self._eprops.add("e:deleted", False)
        self._fdeleted = self._fprops.add("f:deleted", False)

    def _bind_standard_properties(self) -> None:
        """Look the standard properties up again after the containers changed."""
        self._vpoint = self._vprops.get_or_add("v:point", (0.0, 0.0, 0.0))
        self._vconn = self._vprops.get_or_add(
            "v:connectivity", _VertexConnectivity()
        )
        self._hconn = self._hprops.get_or_add(
            "h:connectivity", _HalfedgeConnectivity()
        )
        self._fconn = self._fprops.get_or_add("f:connectivity", _FaceConnectivity())
        self._vdeleted = self._vprops.get_or_add("v:deleted", False)
        self._edeleted = self._eprops.get_or_add("e:deleted", False)
        self._fdeleted = self._fprops.get_or_add("f:deleted", False)

    # -------------------------------------------------------------- sizes

    def vertices_size(self) -> int:
        """Number of vertices, deleted ones included."""
        return len(self._vprops)

    def halfedges_size(self) -> int:
        """Number of halfedges, deleted ones included."""
        return len(self._hprops)

    def edges_size(self) -> int:
        """Number of edges, deleted ones included."""
        return len(self._eprops)

    def faces_size(self) -> int:
        """Number of faces, deleted ones included."""
        return len(self._fprops)

    def n_vertices(self) -> int:
        """Number of vertices that are not deleted."""
        return self.vertices_size() - self._deleted_vertices

    def n_halfedges(self) -> int:
        """Number of halfedges that are not deleted."""
        return self.halfedges_size() - 2 * self._deleted_edges

    def n_edges(self) -> int:
        """Number of edges that are not deleted."""
        return self.edges_size() - self._deleted_edges

    def n_faces(self) -> int:
        """Number of faces that are not deleted."""
        return self.faces_size() - self._deleted_faces

    def is_empty(self) -> bool:
        """Return whether the mesh has no vertices."""
        return self.n_vertices() == 0

    def has_garbage(self) -> bool:
        """Return whether any element is marked deleted."""
        return self._has_garbage

    def is_deleted(self, handle: Handle) -> bool:
        """Return whether the element behind ``handle`` is marked deleted."""
        if isinstance(handle, Vertex):
            return self._vdeleted[handle]
        if isinstance(handle, Halfedge):
            return self._edeleted[self.edge(handle)]
        if isinstance(handle, Edge):
            return self._edeleted[handle]
        if isinstance(handle, Face):
            return self._fdeleted[handle]
        raise TypeError(f"not a mesh handle: {handle!r}")

    def is_valid(self, handle: Handle) -> bool:
        """Return whether ``handle`` indexes into its element array."""
        if isinstance(handle, Vertex):
            return handle.idx < self.vertices_size()
        if isinstance(handle, Halfedge):
            return handle.idx < self.halfedges_size()
        if isinstance(handle, Edge):
            return handle.idx < self.edges_size()
        if isinstance(handle, Face):
            return handle.idx < self.faces_size()
        raise TypeError(f"not a mesh handle: {handle!r}")

    # ------------------------------------------------------- connectivity

    def halfedge(self, item: Vertex | Edge | Face, i: int = 0) -> Halfedge:
        """Outgoing halfedge of a vertex, a halfedge of a face, or side ``i`` of an edge."""
        if isinstance(item, Vertex):
            return self._vconn[item].halfedge
        if isinstance(item, Face):
            return self._fconn[item].halfedge
        if isinstance(item, Edge):
            return Halfedge((item.idx << 1) + _check_side(i))
        raise TypeError(f"expected a Vertex, Edge or Face, got {item!r}")

    def set_halfedge(self, item: Vertex | Face, h: Halfedge) -> None:
        """Set the outgoing halfedge of a vertex or the halfedge of a face."""
        if isinstance(item, Vertex):
            self._vconn[item].halfedge = h
        elif isinstance(item, Face):
            self._fconn[item].halfedge = h
        else:
            raise TypeError(f"expected a Vertex or Face, got {item!r}")

    def is_boundary(self, item: Handle) -> bool:
        """Return whether a vertex, halfedge, edge or face lies on the boundary."""
        if isinstance(item, Halfedge):
            return not self.face(item).is_valid()
        if isinstance(item, Vertex):
            h = self.halfedge(item)
            return not (h.is_valid() and self.face(h).is_valid())
        if isinstance(item, Edge):
            return self.is_boundary(self.halfedge(item, 0)) or self.is_boundary(
                self.halfedge(item, 1)
            )
        if isinstance(item, Face):
            start = h = self.halfedge(item)
            while True:
                if self.is_boundary(self.opposite_halfedge(h)):
                    return True
                h = self.next_halfedge(h)
                if h == start:
                    return False
        raise TypeError(f"not a mesh handle: {item!r}")

    def is_isolated(self, v: Vertex) -> bool:
        """Return whether ``v`` has no incident edge."""
        return not self.halfedge(v).is_valid()

    def to_vertex(self, h: Halfedge) -> Vertex:
        """The vertex ``h`` points to."""
        return self._hconn[h].vertex

    def from_vertex(self, h: Halfedge) -> Vertex:
        """The vertex ``h`` starts from."""
        return self.to_vertex(self.opposite_halfedge(h))

    def set_vertex(self, h: Halfedge, v: Vertex) -> None:
        """Make ``h`` point to ``v``."""
        self._hconn[h].vertex = v

    def face(self, item: Halfedge | Edge, i: int = 0) -> Face:
        """The face of a halfedge, or of side ``i`` of an edge."""
        if isinstance(item, Halfedge):
            return self._hconn[item].face
        if isinstance(item, Edge):
            return self.face(self.halfedge(item, i))
        raise TypeError(f"expected a Halfedge or Edge, got {item!r}")

    def set_face(self, h: Halfedge, f: Face) -> None:
        """Set the face incident to ``h``."""
        self._hconn[h].face = f

    def next_halfedge(self, h: Halfedge) -> Halfedge:
        """The halfedge following ``h`` in its face."""
        return self._hconn[h].next_halfedge

    def set_next_halfedge(self, h: Halfedge, nh: Halfedge) -> None:
        """Link ``nh`` after ``h`` (sets both next and prev)."""
        self._hconn[h].next_halfedge = nh
        self._hconn[nh].prev_halfedge = h

    def prev_halfedge(self, h: Halfedge) -> Halfedge:
        """The halfedge preceding ``h`` in its face."""
        return self._hconn[h].prev_halfedge

    def set_prev_halfedge(self, h: Halfedge, ph: Halfedge) -> None:
        """Link ``ph`` before ``h`` (sets both prev and next)."""
        self._hconn[h].prev_halfedge = ph
        self._hconn[ph].next_halfedge = h

    def opposite_halfedge(self, h: Halfedge) -> Halfedge:
        """The other halfedge of the same edge."""
        return Halfedge(h.idx - 1 if h.idx & 1 else h.idx + 1)

    def ccw_rotated_halfedge(self, h: Halfedge) -> Halfedge:
        """Rotate ``h`` counter-clockwise around its start vertex."""
        return self.opposite_halfedge(self.prev_halfedge(h))

    def cw_rotated_halfedge(self, h: Halfedge) -> Halfedge:
        """Rotate ``h`` clockwise around its start vertex."""
        return self.next_halfedge(self.opposite_halfedge(h))

    def edge(self, h: Halfedge) -> Edge:
        """The edge that ``h`` belongs to."""
        return Edge(h.idx >> 1)

    def vertex(self, e: Edge, i: int) -> Vertex:
        """The vertex that side ``i`` of edge ``e`` points to."""
        return self.to_vertex(self.halfedge(e, i))

    # --------------------------------------------------------- properties

    def add_object_property(self, name: str, default: Any = None) -> Property[Any]:
        """Add a per-mesh property; raises ValueError if the name is taken."""
        return self._oprops.add(name, default)

    def get_object_property(self, name: str) -> Property[Any] | None:
        """Return the per-mesh property called ``name``, or None."""
        return self._oprops.get(name)

    def object_property(self, name: str, default: Any = None) -> Property[Any]:
        """Return the per-mesh property called ``name``, adding it if missing."""
        return self._oprops.get_or_add(name, default)

    def remove_object_property(self, prop: Property[Any] | str) -> None:
        """Remove a per-mesh property."""
        self._oprops.remove(prop)

    def object_properties(self) -> list[str]:
        """Names of all per-mesh properties."""
        return self._oprops.properties()

    def add_vertex_property(self, name: str, default: Any = None) -> Property[Any]:
        """Add a vertex property; raises ValueError if the name is taken."""
        return self._vprops.add(name, default)

    def get_vertex_property(self, name: str) -> Property[Any] | None:
        """Return the vertex property called ``name``, or None."""
        return self._vprops.get(name)

    def vertex_property(self, name: str, default: Any = None) -> Property[Any]:
        """Return the vertex property called ``name``, adding it if missing."""
        return self._vprops.get_or_add(name, default)

    def remove_vertex_property(self, prop: Property[Any] | str) -> None:
        """Remove a vertex property."""
        self._vprops.remove(prop)

    def has_vertex_property(self, name: str) -> bool:
        """Return whether a vertex property called ``name`` exists."""
        return self._vprops.exists(name)

    def vertex_properties(self) -> list[str]:
        """Names of all vertex properties."""
        return self._vprops.properties()

    def add_halfedge_property(self, name: str, default: Any = None) -> Property[Any]:
        """Add a halfedge property; raises ValueError if the name is taken."""
        return self._hprops.add(name, default)

    def get_halfedge_property(self, name: str) -> Property[Any] | None:
        """Return the halfedge property called ``name``, or None."""
        return self._hprops.get(name)

    def halfedge_property(self, name: str, default: Any = None) -> Property[Any]:
        """Return the halfedge property called ``name``, adding it if missing."""
        return self._hprops.get_or_add(name, default)

    def remove_halfedge_property(self, prop: Property[Any] | str) -> None:
        """Remove a halfedge property."""
        self._hprops.remove(prop)

    def has_halfedge_property(self, name: str) -> bool:
        """Return whether a halfedge property called ``name`` exists."""
        return self._hprops.exists(name)

    def halfedge_properties(self) -> list[str]:
        """Names of all halfedge properties."""
        return self._hprops.properties()

    def add_edge_property(self, name: str, default: Any = None) -> Property[Any]:
        """Add an edge property; raises ValueError if the name is taken."""
        return self._eprops.add(name, default)

    def get_edge_property(self, name: str) -> Property[Any] | None:
        """Return the edge property called ``name``, or None."""
        return self._eprops.get(name)

    def edge_property(self, name: str, default: Any = None) -> Property[Any]:
        """Return the edge property called ``name``, adding it if missing."""
        return self._eprops.get_or_add(name, default)

    def remove_edge_property(self, prop: Property[Any] | str) -> None:
        """Remove an edge property."""
        self._eprops.remove(prop)

    def has_edge_property(self, name: str) -> bool:
        """Return whether an edge property called ``name`` exists."""
        return self._eprops.exists(name)

    def edge_properties(self) -> list[str]:
        """Names of all edge properties."""
        return self._eprops.properties()

    def add_face_property(self, name: str, default: Any = None) -> Property[Any]:
        """Add a face property; raises ValueError if the name is taken."""
        return self._fprops.add(name, default)

    def get_face_property(self, name: str) -> Property[Any] | None:
        """Return the face property called ``name``, or None."""
        return self._fprops.get(name)

    def face_property(self, name: str, default: Any = None) -> Property[Any]:
        """Return the face property called ``name``, adding it if missing."""
        return self._fprops.get_or_add(name, default)

    def remove_face_property(self, prop: Property[Any] | str) -> None:
        """Remove a face property."""
        self._fprops.remove(prop)

    def has_face_property(self, name: str) -> bool:
        """Return whether a face property called ``name`` exists."""
        return self._fprops.exists(name)

    def face_properties(self) -> list[str]:
        """Names of all face properties."""
        return self._fprops.properties()

    # --------------------------------------------------------- allocation

    def new_vertex(self) -> Vertex:
        """Allocate a vertex; raises AllocationError at the index limit."""
        if self.vertices_size() == INVALID_INDEX - 1:
            raise AllocationError(
                "SurfaceMesh: cannot allocate vertex, max. index reached"
            )
        self._vprops.push_back()
        return Vertex(self.vertices_size() - 1)

    def new_edge(self, start: Vertex | None = None, end: Vertex | None = None) -> Halfedge:
        """Allocate an edge and return its first halfedge.

        With ``start`` and ``end`` given, the returned halfedge points from
        ``start`` to ``end`` and its opposite the other way.
        """
        if (start is None) != (end is None):
            raise TypeError("give both start and end vertices, or neither")
        if start is not None and start == end:
            raise ValueError("an edge needs two distinct vertices")
        if self.halfedges_size() == INVALID_INDEX - 1:
            raise AllocationError(
                "SurfaceMesh: cannot allocate edge, max. index reached"
            )
        self._eprops.push_back()
        self._hprops.push_back()
        self._hprops.push_back()
        h0 = Halfedge(self.halfedges_size() - 2)
        h1 = Halfedge(self.halfedges_size() - 1)
        if start is not None and end is not None:
            self.set_vertex(h0, end)
            self.set_vertex(h1, start)
        return h0

    def new_face(self) -> Face:
        """Allocate a face; raises AllocationError at the index limit."""
        if self.faces_size() == INVALID_INDEX - 1:
            raise AllocationError(
                "SurfaceMesh: cannot allocate face, max. index reached"
            )
        self._fprops.push_back()
        return Face(self.faces_size() - 1)

    # ----------------------------------------------------------- geometry

    def add_vertex(self, p: Sequence[float]) -> Vertex:
        """Add a vertex at position ``p`` (three coordinates)."""
        point = _to_point(p)
        v = self.new_vertex()
        self._vpoint[v] = point
        return v

    def position(self, v: Vertex) -> Point:
        """The position of ``v``."""
        return self._vpoint[v]

    def set_position(self, v: Vertex, p: Sequence[float]) -> None:
        """Move ``v`` to ``p``."""
        self._vpoint[v] = _to_point(p)

    def positions(self) -> list[Point]:
        """The list of all vertex positions (not a copy)."""
        return self._vpoint.vector()