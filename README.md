# halfmesh

A halfedge data structure for polygonal surface meshes. It is written in plain
Python and needs nothing outside the standard library.

A `SurfaceMesh` (in `halfmesh.surface_mesh`) refers to its vertices,
halfedges, edges and faces through lightweight index handles: `Vertex`,
`Halfedge`, `Edge` and `Face` from `halfmesh.handles`. A handle built without
an index is invalid (`is_valid()` returns False). Printing a handle gives a
short name such as `v0`, `h3` or `f1`.

## Installation

```
pip install .
```

## Example

```python
from halfmesh.surface_mesh import SurfaceMesh

mesh = SurfaceMesh()
v0 = mesh.add_vertex((0.0, 0.0, 0.0))
v1 = mesh.add_vertex((1.0, 0.0, 0.0))
v2 = mesh.add_vertex((0.0, 1.0, 0.0))
v3 = mesh.add_vertex((0.0, 0.0, 1.0))

mesh.add_triangle(v0, v1, v3)
mesh.add_triangle(v1, v2, v3)
mesh.add_triangle(v2, v0, v3)
mesh.add_triangle(v0, v2, v1)

print(mesh.n_vertices(), mesh.n_edges(), mesh.n_faces())  # 4 6 4

for v in mesh.vertices():
    print(v, mesh.valence(v), [str(n) for n in mesh.vertices(v)])
```

## What a mesh offers

- **Building:** `add_vertex`, `add_face`, `add_triangle` and `add_quad`. If a
  face would make a vertex or an edge non-manifold, `add_face` raises
  `halfmesh.topology.TopologyError`. It raises `ValueError` for fewer than
  three vertices.
- **Traversal:** called with no argument, `vertices()`, `halfedges()`,
  `edges()` and `faces()` yield every element that is not deleted.
  `vertices(v)`, `halfedges(v)` and `faces(v)` walk around a vertex.
  `vertices(f)` and `halfedges(f)` walk around a face.
- **Connectivity:** `halfedge`, `to_vertex`, `from_vertex`, `next_halfedge`,
  `prev_halfedge`, `opposite_halfedge`, `ccw_rotated_halfedge`,
  `cw_rotated_halfedge`, `edge`, `vertex` and `face`.
- **Queries:** `is_boundary`, `is_isolated`, `is_manifold`, `valence`,
  `find_halfedge`, `find_edge`, `is_triangle_mesh`, `is_quad_mesh`, `bounds`
  and `edge_length`.
- **Editing:**
  - `insert_vertex` and `insert_edge`.
  - `split`, which takes a face or an edge, and a vertex or a point.
  - `flip`, which raises `TopologyError` when `is_flip_ok` is False.
  - `collapse` (check `is_collapse_ok` first) and `remove_edge`.
- **Deletion:** `delete_vertex`, `delete_edge` and `delete_face` only mark
  elements as deleted. `garbage_collection()` then removes the marked elements
  and renumbers the rest.
- **Copying:** `copy()` makes a deep copy that includes custom properties.
  `assign(other)` takes over only the geometry and connectivity. `clear()`
  empties the mesh.

## Properties

Each kind of element can carry named properties. A property's entries can be
read and written by handle.

```python
weights = mesh.add_vertex_property("v:weight", 0.0)
weights[v0] = 2.5
mesh.has_vertex_property("v:weight")  # True
mesh.get_vertex_property("missing")   # None
```

- `add_*_property` raises `ValueError` if the name is already taken.
- `*_property(name, default)` returns the existing property, or adds it if it
  is missing.
- `property_stats()` prints the names of all vertex, halfedge, edge and face
  properties.

## Command line

The tetrahedron from the example above is installed as a command:

```
halfmesh-demo
```

It prints the vertex, edge and face counts of the tetrahedron. The same mesh
is returned by `halfmesh.demo.tetrahedron()`.

## What it does not do

Meshes are built and inspected in memory only. The package cannot read or
write mesh files in any format. It has no mesh-processing algorithms, such as
smoothing, remeshing or subdivision, and no viewer.

## Tests

```
pip install .[test]
pytest
```