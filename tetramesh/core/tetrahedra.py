"""Six-tetrahedron decomposition of a voxel.

Corner indices refer to the voxel numbering in ``voxel.CORNER_OFFSETS``.
The p0..p3 order of every row fixes which corners each tetrahedron edge
joins, so the rows must not be reordered.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .voxel import Voxel

# (p0, p1, p2, p3) corner indices per tetrahedron
DECOMPOSITION = (
    (3, 7, 4, 5),  # T1
    (3, 7, 5, 6),  # T2
    (3, 5, 4, 0),  # T3
    (5, 1, 0, 3),  # T4
    (5, 1, 3, 2),  # T5
    (3, 5, 2, 6),  # T6
)


@dataclass(frozen=True, eq=False)
class Tetrahedron:
    """Four corners p0..p3 with parallel densities."""
    vertices: np.ndarray   # (4, 3)
    densities: np.ndarray  # (4,)


def decompose(voxel: Voxel) -> List[Tetrahedron]:
    """Split a voxel into its six tetrahedra, in T1..T6 order."""
    tetrahedra = []
    for corners in DECOMPOSITION:
        idx = list(corners)
        tetrahedra.append(Tetrahedron(
            vertices=voxel.vertices[idx],
            densities=voxel.densities[idx],
        ))
    return tetrahedra
