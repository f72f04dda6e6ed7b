import math

import pytest

from halfmesh.handles import Edge, Face, Halfedge, Vertex
from halfmesh.traversal import TraversableMesh


def _triangle(mesh, a, b, c):
    """Link a lone triangle a-b-c by hand and return its handles."""
    hab = mesh.new_edge(a, b)
    hbc = mesh.new_edge(b, c)
    hca = mesh.new_edge(c, a)
    oba = mesh.opposite_halfedge(hab)
    ocb = mesh.opposite_halfedge(hbc)
    oac = mesh.opposite_halfedge(hca)
    f = mesh.new_face()
    mesh.set_halfedge(f, hab)
    for h in (hab, hbc, hca):
        mesh.set_face(h, f)
    mesh.set_next_halfedge(hab, hbc)
    mesh.set_next_halfedge(hbc, hca)
    mesh.set_next_halfedge(hca, hab)
    mesh.set_next_halfedge(oba, oac)
    mesh.set_next_halfedge(oac, ocb)
    mesh.set_next_halfedge(ocb, oba)
    mesh.set_halfedge(a, oac)
    mesh.set_halfedge(b, oba)
    mesh.set_halfedge(c, ocb)
    return {
        "face": f,
        "inner": [hab, hbc, hca],
        "in_a": oba,
        "out_a": oac,
    }


@pytest.fixture
def tri():
    mesh = TraversableMesh()
    v0 = mesh.add_vertex((0, 0, 0))
    v1 = mesh.add_vertex((3, 0, 0))
    v2 = mesh.add_vertex((0, 4, 0))
    info = _triangle(mesh, v0, v1, v2)
    return mesh, (v0, v1, v2), info


@pytest.fixture
def bowtie():
    mesh = TraversableMesh()
    v = mesh.add_vertex((0, 0, 0))
    b = mesh.add_vertex((1, 0, 0))
    c = mesh.add_vertex((1, 1, 0))
    d = mesh.add_vertex((-1, 0, 0))
    e = mesh.add_vertex((-1, -1, 0))
    t1 = _triangle(mesh, v, b, c)
    t2 = _triangle(mesh, v, d, e)
    mesh.set_next_halfedge(t1["in_a"], t2["out_a"])
    mesh.set_next_halfedge(t2["in_a"], t1["out_a"])
    return mesh, v, t1, t2


def test_linear_iteration_counts(tri):
    mesh, verts, _ = tri
    assert list(mesh.vertices()) == list(verts)
    assert list(mesh.edges()) == [Edge(0), Edge(1), Edge(2)]
    assert list(mesh.halfedges()) == [Halfedge(i) for i in range(6)]
    assert list(mesh.faces()) == [Face(0)]


def test_vertices_around_face(tri):
    mesh, (v0, v1, v2), info = tri
    assert list(mesh.vertices(info["face"])) == [v1, v2, v0]
    assert list(mesh.halfedges(info["face"])) == info["inner"]


def test_one_ring_of_vertex(tri):
    mesh, (v0, v1, v2), _ = tri
    assert list(mesh.vertices(v0)) == [v2, v1]
    assert list(mesh.faces(v0)) == [Face(0)]


def test_outgoing_halfedges_start_at_vertex(tri):
    mesh, verts, _ = tri
    for v in verts:
        outgoing = list(mesh.halfedges(v))
        assert len(outgoing) == 2
        assert all(mesh.from_vertex(h) == v for h in outgoing)
        assert outgoing[0] == mesh.halfedge(v)


def test_isolated_vertex_has_empty_neighbourhood():
    mesh = TraversableMesh()
    v = mesh.add_vertex((1, 2, 3))
    assert list(mesh.vertices(v)) == []
    assert list(mesh.halfedges(v)) == []
    assert list(mesh.faces(v)) == []
    assert mesh.is_manifold(v) is True


def test_triangle_vertices_are_manifold(tri):
    mesh, verts, _ = tri
    assert all(mesh.is_manifold(v) for v in verts)


def test_bowtie_centre_is_not_manifold(bowtie):
    mesh, v, t1, t2 = bowtie
    assert mesh.is_manifold(v) is False
    assert sorted(mesh.faces(v)) == sorted([t1["face"], t2["face"]])
    assert len(list(mesh.halfedges(v))) == 4


def test_bounds_of_points(tri):
    mesh, _, _ = tri
    assert mesh.bounds() == ((0.0, 0.0, 0.0), (3.0, 4.0, 0.0))


def test_bounds_of_empty_mesh():
    lo, hi = TraversableMesh().bounds()
    assert all(c == math.inf for c in lo)
    assert all(c == -math.inf for c in hi)


def test_edge_lengths(tri):
    mesh, _, _ = tri
    assert mesh.edge_length(Edge(0)) == pytest.approx(3.0)
    assert mesh.edge_length(Edge(1)) == pytest.approx(5.0)
    assert mesh.edge_length(Edge(2)) == pytest.approx(4.0)


def test_deleted_elements_are_skipped(tri):
    mesh, (v0, v1, v2), _ = tri
    mesh._vdeleted[v1] = True
    mesh._fdeleted[Face(0)] = True
    mesh._has_garbage = True
    assert list(mesh.vertices()) == [v0, v2]
    assert list(mesh.faces()) == []


def test_wrong_handle_kinds_raise(tri):
    mesh, _, _ = tri
    with pytest.raises(TypeError):
        mesh.vertices(Edge(0))
    with pytest.raises(TypeError):
        mesh.halfedges(Edge(0))
    with pytest.raises(TypeError):
        mesh.faces(Face(0))