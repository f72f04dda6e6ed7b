"""Halfedge data structure for polygonal surface meshes."""

__version__ = "0.1.0"
__all__ = ["__version__"]