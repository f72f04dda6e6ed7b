"""Build a small tetrahedron and print its element counts."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from halfmesh.surface_mesh import SurfaceMesh

__all__ = ["tetrahedron", "main"]


def tetrahedron() -> SurfaceMesh:
    """Return a closed tetrahedron with four vertices and four triangles."""
    mesh = SurfaceMesh()
    v0 = mesh.add_vertex((0, 0, 0))
    v1 = mesh.add_vertex((1, 0, 0))
    v2 = mesh.add_vertex((0, 1, 0))
    v3 = mesh.add_vertex((0, 0, 1))
    mesh.add_triangle(v0, v1, v3)
    mesh.add_triangle(v1, v2, v3)
    mesh.add_triangle(v2, v0, v3)
    mesh.add_triangle(v0, v2, v1)
    return mesh


def main(argv: Sequence[str] | None = None) -> int:
    """Print the number of vertices, edges and faces of the tetrahedron."""
    parser = argparse.ArgumentParser(
        prog="halfmesh-demo",
        description="Build a tetrahedron and print its element counts.",
    )
    parser.parse_args(argv)
    mesh = tetrahedron()
    out = sys.stdout
    print(f"vertices: {mesh.n_vertices()}", file=out)
    print(f"edges: {mesh.n_edges()}", file=out)
    print(f"faces: {mesh.n_faces()}", file=out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())