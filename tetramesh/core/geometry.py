"""Point and triangle primitives plus edge interpolation."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np


class DegenerateEdgeError(ValueError):
    """Both edge endpoints carry the same density; the crossing is undefined."""


def interpolate(
    a: np.ndarray,
    b: np.ndarray,
    density_a: float,
    density_b: float,
    isovalue: float,
) -> np.ndarray:
    """Point on segment a-b where the linear density equals isovalue.

    t = (isovalue - density_a) / (density_b - density_a); t is not clamped.

    Raises:
        DegenerateEdgeError: if density_a == density_b
    """
    if density_a == density_b:
        raise DegenerateEdgeError(
            f"Edge densities are equal ({density_a}); cannot interpolate"
        )
    t = (isovalue - density_a) / (density_b - density_a)
    return a + t * (b - a)


@dataclass(frozen=True, eq=False)
class Triangle:
    """Three positions on tetrahedron edges."""

    a: np.ndarray
    b: np.ndarray
    c: np.ndarray

    def as_array(self) -> np.ndarray:
        """(3, 3) array of vertex positions."""
        return np.stack([self.a, self.b, self.c])

    def normal(self) -> np.ndarray:
        """Unnormalized face normal (right-hand rule over a, b, c)."""
        return np.cross(self.b - self.a, self.c - self.a)

    def flipped(self) -> "Triangle":
        return Triangle(self.a, self.c, self.b)


def triangles_to_array(triangles: Sequence[Triangle]) -> np.ndarray:
    """Stack triangles into an (M, 3, 3) array."""
    if len(triangles) == 0:
        return np.zeros((0, 3, 3), dtype=np.float64)
    return np.stack([t.as_array() for t in triangles])


def tetrahedron_volume(p0, p1, p2, p3) -> float:
    """Signed volume of the tetrahedron p0..p3."""
    return float(np.dot(p1 - p0, np.cross(p2 - p0, p3 - p0)) / 6.0)
