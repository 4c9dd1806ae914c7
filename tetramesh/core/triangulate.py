"""Triangle emission per tetrahedron from its edge-crossing mask."""

from typing import Dict, List, Optional

import numpy as np

from .cases import EDGES, Mask, classify, inside_flags, mask_to_str
from .geometry import DegenerateEdgeError, Triangle, interpolate
from .tetrahedra import Tetrahedron

# Mask -> triangles, each triangle given as three edge names
TRIANGLE_RECIPES: Dict[Mask, tuple] = {
    (0, 0, 0, 0, 0, 0): (),
    (0, 0, 1, 0, 1, 1): (("p03", "p23", "p31"),),
    (0, 1, 0, 1, 1, 0): (("p02", "p12", "p23"),),
    (0, 1, 1, 1, 0, 1): (("p02", "p03", "p31"), ("p02", "p31", "p12")),
    (1, 0, 0, 1, 0, 1): (("p01", "p12", "p31"),),
    (1, 0, 1, 1, 1, 0): (("p01", "p03", "p23"), ("p01", "p12", "p23")),
    (1, 1, 0, 0, 1, 1): (("p01", "p02", "p31"), ("p02", "p23", "p31")),
    (1, 1, 1, 0, 0, 0): (("p01", "p02", "p03"),),
}


def edge_points(tet: Tetrahedron, isovalue: float) -> Dict[str, Optional[np.ndarray]]:
    """Interpolation point on each of the 6 edges.

    Edges whose endpoints share a density have no crossing and map to None.
    """
    points = {}
    for name, i, j in EDGES:
        try:
            points[name] = interpolate(
                tet.vertices[i], tet.vertices[j],
                tet.densities[i], tet.densities[j],
                isovalue,
            )
        except DegenerateEdgeError:
            points[name] = None
    return points


def _outward(tet: Tetrahedron, isovalue: float) -> np.ndarray:
    """Direction from the inside corners toward the outside corners."""
    flags = np.array(inside_flags(tet.densities, isovalue))
    return tet.vertices[~flags].mean(axis=0) - tet.vertices[flags].mean(axis=0)


def triangulate(
    tet: Tetrahedron,
    isovalue: float,
    out: List[Triangle],
    mask: Optional[Mask] = None,
    orient: bool = False,
) -> int:
    """Append this tetrahedron's triangles to ``out``.

    Args:
        tet: Tetrahedron to polygonise
        isovalue: Surface threshold
        out: Output sequence, appended in place
        mask: Precomputed edge-crossing mask (classified here when omitted)
        orient: Flip windings so normals face away from inside corners

    Returns:
        Number of triangles appended (0, 1 or 2)
    """
    if mask is None:
        mask = classify(tet.densities, isovalue)
    recipe = TRIANGLE_RECIPES[mask]
    if not recipe:
        return 0

    points = edge_points(tet, isovalue)
    direction = _outward(tet, isovalue) if orient else None

    for names in recipe:
        corners = [points[n] for n in names]
        for n, p in zip(names, corners):
            if p is None:
                raise DegenerateEdgeError(
                    f"Crossing edge {n} of mask {mask_to_str(mask)} has equal end densities"
                )
        tri = Triangle(*corners)
        if direction is not None and np.dot(tri.normal(), direction) < 0:
            tri = tri.flipped()
        out.append(tri)

    return len(recipe)
