"""Cell traversal driver for marching tetrahedra.

Walks the field's bounding box cell by cell (z outermost, then y, then x),
starting one step below the minimum so that cells whose high corners sit on
the minimum are visited too. Triangles from adjacent cells are not merged.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .cases import EMPTY_MASK, classify
from .field import DensityField
from .geometry import Triangle
from .tetrahedra import DECOMPOSITION, decompose
from .triangulate import triangulate
from .voxel import Voxel, build_voxel

logger = logging.getLogger(__name__)

# Slack for the inclusive upper bound of the origin ranges
_RANGE_EPS = 1e-9


@dataclass
class MarchResult:
    """Triangles and traversal statistics of one extraction run."""

    triangles: List[Triangle]
    n_cells: int = 0
    n_tetrahedra: int = 0
    n_crossed: int = 0
    n_missing: int = 0
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def n_triangles(self) -> int:
        return len(self.triangles)


def axis_origins(lo: float, hi: float, step: float) -> np.ndarray:
    """Cell origins lo - step, lo, lo + step, ... up to hi inclusive."""
    if step <= 0:
        raise ValueError(f"Step size must be positive, got {step}")
    start = lo - step
    n = int(np.floor((hi - start) / step + _RANGE_EPS)) + 1
    return start + np.arange(n, dtype=np.float64) * step


def polygonise_voxel(
    voxel: Voxel,
    isovalue: float,
    out: List[Triangle],
    orient: bool = False,
    timings: Optional[Dict[str, float]] = None,
) -> int:
    """Triangulate all six tetrahedra of a voxel into ``out``.

    If ``timings`` is given, classify/triangulate seconds are added to it.

    Returns:
        Number of tetrahedra the surface crosses
    """
    t0 = time.perf_counter()
    tetrahedra = decompose(voxel)
    masks = [classify(tet.densities, isovalue) for tet in tetrahedra]
    t1 = time.perf_counter()

    crossed = 0
    for tet, mask in zip(tetrahedra, masks):
        if mask == EMPTY_MASK:
            continue
        crossed += 1
        triangulate(tet, isovalue, out, mask=mask, orient=orient)

    if timings is not None:
        timings["classify"] = timings.get("classify", 0.0) + (t1 - t0)
        timings["triangulate"] = timings.get("triangulate", 0.0) + (time.perf_counter() - t1)
    return crossed


def march(
    density_field: DensityField,
    isovalue: float,
    step: Sequence[float] = (1.0, 1.0, 1.0),
    bounds: Optional[Tuple[Sequence[float], Sequence[float]]] = None,
    orient: bool = False,
) -> MarchResult:
    """Extract the isosurface of a density field.

    Args:
        density_field: Sampled density field
        isovalue: Surface threshold (density < isovalue is inside)
        step: Voxel size (dx, dy, dz)
        bounds: (min, max) box to traverse; defaults to the field's bounds
        orient: Orient every triangle away from the inside corners

    Returns:
        MarchResult with triangles in traversal order
    """
    dx, dy, dz = (float(s) for s in step)
    lo, hi = bounds if bounds is not None else density_field.bounds
    lo = np.asarray(lo, dtype=np.float64)
    hi = np.asarray(hi, dtype=np.float64)

    xs = axis_origins(lo[0], hi[0], dx)
    ys = axis_origins(lo[1], hi[1], dy)
    zs = axis_origins(lo[2], hi[2], dz)
    size = np.array([dx, dy, dz])

    result = MarchResult(triangles=[])
    timings = {"voxel": 0.0, "classify": 0.0, "triangulate": 0.0}

    for z in zs:
        for y in ys:
            for x in xs:
                t0 = time.perf_counter()
                voxel = build_voxel(density_field, (x, y, z), size)
                timings["voxel"] += time.perf_counter() - t0

                result.n_crossed += polygonise_voxel(
                    voxel, isovalue, result.triangles, orient=orient, timings=timings,
                )
                result.n_cells += 1
                result.n_tetrahedra += len(DECOMPOSITION)
                result.n_missing += voxel.missing

    result.timings = timings

    logger.info(
        "Marching tetrahedra: %d cells, %d/%d tetrahedra crossed, %d triangles",
        result.n_cells, result.n_crossed, result.n_tetrahedra, result.n_triangles,
    )
    if result.n_missing:
        logger.debug("%d voxel corners used the outside density", result.n_missing)

    return result
