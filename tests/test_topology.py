import pytest

from halfmesh.handles import Edge, Face, Halfedge, Vertex
from halfmesh.topology import TopologyError, TopologyMesh


def check_links(mesh):
    for h in mesh.halfedges():
        nh = mesh.next_halfedge(h)
        assert mesh.prev_halfedge(nh) == h
        assert mesh.to_vertex(h) == mesh.from_vertex(nh)
        assert mesh.face(h) == mesh.face(nh)
    for v in mesh.vertices():
        h = mesh.halfedge(v)
        if h.is_valid():
            assert mesh.from_vertex(h) == v


def tetrahedron():
    mesh = TopologyMesh()
    v0 = mesh.add_vertex((0, 0, 0))
    v1 = mesh.add_vertex((1, 0, 0))
    v2 = mesh.add_vertex((0, 1, 0))
    v3 = mesh.add_vertex((0, 0, 1))
    mesh.add_triangle(v0, v1, v3)
    mesh.add_triangle(v1, v2, v3)
    mesh.add_triangle(v2, v0, v3)
    mesh.add_triangle(v0, v2, v1)
    return mesh


def vertex_onering():
    mesh = TopologyMesh()
    v0 = mesh.add_vertex((0.4499998093, 0.5196152329, 0.0))
    v1 = mesh.add_vertex((0.2999998033, 0.5196152329, 0.0))
    v2 = mesh.add_vertex((0.5249998569, 0.3897114396, 0.0))
    v3 = mesh.add_vertex((0.3749998510, 0.3897114396, 0.0))
    v4 = mesh.add_vertex((0.2249998450, 0.3897114396, 0.0))
    v5 = mesh.add_vertex((0.4499999285, 0.2598076165, 0.0))
    v6 = mesh.add_vertex((0.2999999225, 0.2598076165, 0.0))
    mesh.add_triangle(v3, v0, v1)
    mesh.add_triangle(v3, v2, v0)
    mesh.add_triangle(v4, v3, v1)
    mesh.add_triangle(v5, v2, v3)
    mesh.add_triangle(v6, v5, v3)
    mesh.add_triangle(v6, v3, v4)
    return mesh


def edge_onering():
    mesh = TopologyMesh()
    pts = [
        (0.5999997854, 0.5196152329, 0.0),
        (0.4499998093, 0.5196152329, 0.0),
        (0.2999998033, 0.5196152329, 0.0),
        (0.6749998331, 0.3897114396, 0.0),
        (0.5249998569, 0.3897114396, 0.0),
        (0.3749998510, 0.3897114396, 0.0),
        (0.2249998450, 0.3897114396, 0.0),
        (0.5999999046, 0.2598076165, 0.0),
        (0.4499999285, 0.2598076165, 0.0),
        (0.2999999225, 0.2598076165, 0.0),
    ]
    v = [mesh.add_vertex(p) for p in pts]
    for a, b, c in [
        (4, 0, 1), (4, 3, 0), (5, 1, 2), (5, 4, 1), (6, 5, 2),
        (7, 3, 4), (8, 7, 4), (8, 4, 5), (9, 8, 5), (9, 5, 6),
    ]:
        mesh.add_triangle(v[a], v[b], v[c])
    return mesh


def l_shape():
    mesh = TopologyMesh()
    pts = [
        (0.0, 0.0, 0.0), (0.5, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 0.5, 0.0),
        (0.5, 0.5, 0.0), (0.5, 1.0, 0.0), (0.5, 1.5, 0.0), (0.5, 2.0, 0.0),
        (0.0, 2.0, 0.0), (0.0, 1.5, 0.0), (0.0, 1.0, 0.0), (0.0, 0.5, 0.0),
    ]
    mesh.add_face([mesh.add_vertex(p) for p in pts])
    return mesh


def two_triangles():
    mesh = TopologyMesh()
    v = [mesh.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]]
    mesh.add_triangle(v[0], v[1], v[2])
    mesh.add_triangle(v[0], v[2], v[3])
    return mesh, v


def test_tetrahedron_counts():
    mesh = tetrahedron()
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (4, 6, 4)
    assert all(mesh.valence(v) == 3 for v in mesh.vertices())
    assert mesh.is_triangle_mesh()
    assert not mesh.is_quad_mesh()
    assert not any(mesh.is_boundary(v) for v in mesh.vertices())
    check_links(mesh)


def test_vertex_onering():
    mesh = vertex_onering()
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (7, 12, 6)
    assert mesh.valence(Vertex(3)) == 6
    assert not mesh.is_boundary(Vertex(3))
    assert all(mesh.is_manifold(v) for v in mesh.vertices())
    check_links(mesh)


def test_edge_onering():
    mesh = edge_onering()
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (10, 19, 10)
    assert not mesh.is_boundary(Vertex(4))
    assert not mesh.is_boundary(Vertex(5))
    check_links(mesh)


def test_l_shape():
    mesh = l_shape()
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (12, 12, 1)
    assert mesh.valence(Face(0)) == 12
    check_links(mesh)


def test_patch_relinking():
    mesh = TopologyMesh()
    c = mesh.add_vertex((0, 0, 0))
    ring = [mesh.add_vertex(p) for p in [(1, 0, 0), (0, 1, 0), (-1, 0, 0), (0, -1, 0)]]
    a, b, d, e = ring
    mesh.add_triangle(c, a, b)
    mesh.add_triangle(c, d, e)
    mesh.add_triangle(c, b, d)
    assert mesh.n_faces() == 3
    assert mesh.valence(c) == 4
    assert mesh.is_manifold(c)
    check_links(mesh)


def test_complex_edge_raises():
    mesh, v = two_triangles()
    with pytest.raises(TopologyError, match="Complex edge"):
        mesh.add_triangle(v[0], v[1], v[2])


def test_complex_vertex_raises():
    mesh = tetrahedron()
    extra1 = mesh.add_vertex((5, 5, 5))
    extra2 = mesh.add_vertex((6, 5, 5))
    with pytest.raises(TopologyError, match="Complex vertex"):
        mesh.add_triangle(Vertex(0), extra1, extra2)


def test_add_face_needs_three_vertices():
    mesh = TopologyMesh()
    v0 = mesh.add_vertex((0, 0, 0))
    v1 = mesh.add_vertex((1, 0, 0))
    with pytest.raises(ValueError):
        mesh.add_face([v0, v1])


def test_add_quad():
    mesh = TopologyMesh()
    v = [mesh.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]]
    mesh.add_quad(*v)
    assert mesh.is_quad_mesh()
    assert not mesh.is_triangle_mesh()
    assert mesh.n_edges() == 4


def test_find_halfedge_and_edge():
    mesh, v = two_triangles()
    h = mesh.find_halfedge(v[0], v[2])
    assert mesh.from_vertex(h) == v[0]
    assert mesh.to_vertex(h) == v[2]
    assert mesh.find_edge(v[0], v[2]) == mesh.edge(h)
    assert not mesh.find_halfedge(v[1], v[3]).is_valid()
    assert not mesh.find_edge(v[1], v[3]).is_valid()


def test_split_face_with_point():
    mesh = TopologyMesh()
    v = [mesh.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (0, 1, 0)]]
    f = mesh.add_triangle(*v)
    c = mesh.split(f, (0.25, 0.25, 0.0))
    assert isinstance(c, Vertex)
    assert mesh.position(c) == (0.25, 0.25, 0.0)
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (4, 6, 3)
    assert mesh.valence(c) == 3
    assert mesh.is_triangle_mesh()
    check_links(mesh)


def test_split_interior_edge():
    mesh, v = two_triangles()
    e = mesh.find_edge(v[0], v[2])
    h = mesh.split(e, (0.5, 0.5, 0.0))
    new_v = Vertex(4)
    assert mesh.to_vertex(h) == new_v
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (5, 8, 4)
    assert mesh.valence(new_v) == 4
    assert not mesh.is_boundary(new_v)
    check_links(mesh)


def test_split_boundary_edge():
    mesh = TopologyMesh()
    v = [mesh.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (0, 1, 0)]]
    mesh.add_triangle(*v)
    e = mesh.find_edge(v[0], v[1])
    h = mesh.split(e, (0.5, 0.0, 0.0))
    assert mesh.to_vertex(h) == Vertex(3)
    assert (mesh.n_vertices(), mesh.n_edges(), mesh.n_faces()) == (4, 5, 2)
    assert mesh.is_boundary(Vertex(3))
    check_links(mesh)


def test_insert_vertex():
    mesh = TopologyMesh()
    v = [mesh.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (0, 1, 0)]]
    f = mesh.add_triangle(*v)
    e = mesh.find_edge(v[0], v[1])
    h = mesh.insert_vertex(e, (0.5, 0.0, 0.0))
    mid = Vertex(3)
    assert mesh.to_vertex(h) == mid
    assert mesh.valence(f) == 4
    assert mesh.n_edges() == 4
    assert mesh.valence(mid) == 2
    check_links(mesh)


def test_insert_edge():
    mesh = TopologyMesh()
    v = [mesh.add_vertex(p) for p in [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]]
    f = mesh.add_quad(*v)
    h0 = mesh.halfedge(f)
    h1 = mesh.next_halfedge(mesh.next_halfedge(h0))
    h = mesh.insert_edge(h0, h1)
    assert mesh.from_vertex(h) == mesh.to_vertex(h0)
    assert mesh.to_vertex(h) == mesh.to_vertex(h1)
    assert mesh.n_faces() == 2
    assert mesh.n_edges() == 5
    assert mesh.is_triangle_mesh()
    check_links(mesh)


def test_insert_edge_different_faces_raises():
    mesh, v = two_triangles()
    h0 = mesh.halfedge(Face(0))
    h1 = mesh.halfedge(Face(1))
    with pytest.raises(ValueError):
        mesh.insert_edge(h0, h1)


def test_flip():
    mesh, v = two_triangles()
    e = mesh.find_edge(v[0], v[2])
    assert mesh.is_flip_ok(e)
    mesh.flip(e)
    assert mesh.find_edge(v[1], v[3]) == e
    assert not mesh.find_edge(v[0], v[2]).is_valid()
    assert mesh.n_edges() == 5
    assert mesh.is_triangle_mesh()
    check_links(mesh)


def test_flip_boundary_edge_rejected():
    mesh, v = two_triangles()
    e = mesh.find_edge(v[0], v[1])
    assert not mesh.is_flip_ok(e)
    with pytest.raises(TopologyError):
        mesh.flip(e)


def test_copy_is_independent():
    mesh = tetrahedron()
    tag = mesh.add_vertex_property("v:tag", 0)
    tag[Vertex(1)] = 7
    other = mesh.copy()
    assert other.get_vertex_property("v:tag")[Vertex(1)] == 7
    other.add_vertex((9, 9, 9))
    other.get_vertex_property("v:tag")[Vertex(1)] = 3
    assert mesh.n_vertices() == 4
    assert other.n_vertices() == 5
    assert tag[Vertex(1)] == 7
    check_links(other)


def test_assign_drops_custom_properties():
    source = tetrahedron()
    source.add_vertex_property("v:tag", 1)
    target = TopologyMesh()
    target.add_face_property("f:mine", 0)
    result = target.assign(source)
    assert result is target
    assert (target.n_vertices(), target.n_edges(), target.n_faces()) == (4, 6, 4)
    assert not target.has_vertex_property("v:tag")
    assert not target.has_face_property("f:mine")
    assert target.position(Vertex(3)) == (0.0, 0.0, 1.0)
    target.set_position(Vertex(3), (2, 2, 2))
    assert source.position(Vertex(3)) == (0.0, 0.0, 1.0)
    check_links(target)


def test_clear():
    mesh = tetrahedron()
    mesh.add_edge_property("e:custom", 0)
    mesh.clear()
    assert mesh.is_empty()
    assert mesh.n_faces() == 0
    assert not mesh.has_edge_property("e:custom")
    assert mesh.has_vertex_property("v:point")


def test_free_memory_keeps_data():
    mesh = tetrahedron()
    mesh.free_memory()
    assert mesh.n_faces() == 4
    assert len(mesh.positions()) == 4


def test_reserve_rejects_negative():
    mesh = TopologyMesh()
    with pytest.raises(ValueError):
        mesh.reserve(-1, 0, 0)


def test_property_stats(capsys):
    mesh = TopologyMesh()
    mesh.add_face_property("f:colour", 0)
    mesh.property_stats()
    out = capsys.readouterr().out
    assert "point properties:" in out
    assert "\tv:point" in out
    assert "\tf:colour" in out


def test_valence_rejects_edge():
    mesh = tetrahedron()
    with pytest.raises(TypeError):
        mesh.valence(Edge(0))


def test_outgoing_halfedge_of_boundary_vertex_is_boundary():
    mesh = edge_onering()
    for v in mesh.vertices():
        if mesh.is_boundary(v):
            assert mesh.is_boundary(mesh.halfedge(v))
        else:
            assert not any(mesh.is_boundary(h) for h in mesh.halfedges(v))
    assert isinstance(mesh.halfedge(Vertex(0)), Halfedge)