[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "halfmesh"
version = "0.1.0"
description = "A halfedge data structure for polygonal surface meshes"
requires-python = ">=3.10"
dependencies = []
keywords = ["mesh", "halfedge", "geometry", "polygon", "topology"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
halfmesh-demo = "halfmesh.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["halfmesh"]

[tool.pytest.ini_options]
addopts = "-ra"
