"""Marching tetrahedra core: field, voxel, decomposition, case table, triangulation."""

from .field import DensityField
from .geometry import DegenerateEdgeError, Triangle, interpolate
from .voxel import Voxel, build_voxel
from .tetrahedra import Tetrahedron, decompose
from .cases import CASE_TABLE, classify
from .triangulate import TRIANGLE_RECIPES, triangulate
from .march import MarchResult, march, polygonise_voxel
from .mesh import TriangleMesh

__all__ = [
    "DensityField",
    "DegenerateEdgeError",
    "Triangle",
    "interpolate",
    "Voxel",
    "build_voxel",
    "Tetrahedron",
    "decompose",
    "CASE_TABLE",
    "classify",
    "TRIANGLE_RECIPES",
    "triangulate",
    "MarchResult",
    "march",
    "polygonise_voxel",
    "TriangleMesh",
]
