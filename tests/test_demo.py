import pytest

from halfmesh.demo import main, tetrahedron


def test_tetrahedron_counts():
    mesh = tetrahedron()
    assert mesh.n_vertices() == 4
    assert mesh.n_edges() == 6
    assert mesh.n_faces() == 4


def test_tetrahedron_is_closed_triangle_mesh():
    mesh = tetrahedron()
    assert mesh.is_triangle_mesh()
    assert not any(mesh.is_boundary(v) for v in mesh.vertices())
    assert all(mesh.valence(v) == 3 for v in mesh.vertices())


def test_main_prints_counts(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out == "vertices: 4\nedges: 6\nfaces: 4\n"


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as info:
        main(["--bogus"])
    assert info.value.code == 2